"""Modifiers changing field values before validation."""

import dataclasses
import logging
import threading
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Dict,
    FrozenSet,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    get_args,
    get_origin,
    get_type_hints,
)

from api_validation.constants import MODIFIERS_METADATA_KEY
from api_validation.errors import ConfigurationError
from api_validation.preprocessing.base import Preprocessor

if TYPE_CHECKING:
    from api_validation.preprocessing.config import PreprocessingConfig

logger = logging.getLogger(__name__)

TagT = TypeVar("TagT")

# Modifier tags of one class: field name -> tags with a registered modifier
FieldTags = Mapping[str, Tuple[Any, ...]]


def modifiers(*tags: Any) -> Dict[str, Tuple[Any, ...]]:
    """Build dataclass field metadata declaring modifier tags.

    Example:
        name: str = field(default="", metadata=modifiers(Trim()))
    """
    return {MODIFIERS_METADATA_KEY: tags}


class Modifier(ABC, Generic[TagT]):
    """Modifies the value of a field, typically before it is validated.

    A modifier implements one tag type. Tags are declared on fields, either in
    dataclass field metadata (see :func:`modifiers`) or as ``Annotated`` type
    hint metadata.
    """

    def __init__(self, tag_type: Type[TagT]):
        self.tag_type = tag_type

    @abstractmethod
    def process(self, obj: Any, field_name: str, tag: TagT) -> None:
        """Modify a field of an object.

        The whole object is given since a modification may depend on other fields.
        """
        pass


class ModifierRegistry:
    """Registry of modifiers by tag type."""

    def __init__(self, modifiers: Iterable[Modifier] = ()):
        self._modifiers: Dict[Type, Modifier] = {}
        for modifier in modifiers:
            self.register(modifier)

    def register(self, modifier: Modifier) -> "ModifierRegistry":
        if modifier.tag_type in self._modifiers:
            raise ConfigurationError(
                f"A modifier is already registered for {modifier.tag_type.__name__}"
            )
        self._modifiers[modifier.tag_type] = modifier
        return self

    def get(self, tag_type: Type) -> Modifier:
        if tag_type not in self._modifiers:
            raise ConfigurationError(f"No modifier registered for {tag_type.__name__}")
        return self._modifiers[tag_type]

    @property
    def tag_types(self) -> FrozenSet[Type]:
        return frozenset(self._modifiers)


def _field_hints(cls: Type) -> Dict[str, Any]:
    """Return the type hints of a class, including inherited ones.

    Hints that cannot be resolved, such as forward references to names only
    imported for type checking, are returned unevaluated. ``Annotated`` hints
    written without quotes keep their metadata.
    """
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Using raw annotations of {cls.__name__}: {e}")

    hints: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        try:
            hints.update(getattr(klass, "__annotations__", None) or {})
        except NameError as e:
            logger.debug(f"Skipping annotations of {klass.__name__}: {e}")
    return hints


def _declared_tags(cls: Type) -> Dict[str, List[Any]]:
    """Return all tags declared on the fields of a class, including inherited fields."""
    tags: Dict[str, List[Any]] = {}

    for name, hint in _field_hints(cls).items():
        if get_origin(hint) is Annotated:
            tags.setdefault(name, []).extend(get_args(hint)[1:])

    if dataclasses.is_dataclass(cls):
        for field in dataclasses.fields(cls):
            tags.setdefault(field.name, []).extend(
                field.metadata.get(MODIFIERS_METADATA_KEY, ())
            )

    return tags


class FieldModifierCache:
    """Process-wide cache of the modifier tags declared on each class.

    An entry is computed once per class and set of registered tag types, on
    first use, and is never invalidated. Writes are guarded by a lock and
    entries are read-only, so the cache can be shared by concurrent runs.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[Tuple[Type, FrozenSet[Type]], FieldTags] = {}

    def get(self, cls: Type, tag_types: FrozenSet[Type]) -> FieldTags:
        key = (cls, tag_types)
        entry = self._entries.get(key)
        if entry is not None:
            return entry

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._scan(cls, tag_types)
                self._entries[key] = entry
        return entry

    def _scan(self, cls: Type, tag_types: FrozenSet[Type]) -> FieldTags:
        field_tags: Dict[str, Tuple[Any, ...]] = {}
        for name, tags in _declared_tags(cls).items():
            supported = tuple(tag for tag in tags if type(tag) in tag_types)
            if supported:
                field_tags[name] = supported
        logger.debug(f"Cached modifier tags for {cls.__qualname__}: {field_tags}")
        return MappingProxyType(field_tags)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, cls: Type) -> bool:
        return any(key[0] is cls for key in self._entries)


FIELD_MODIFIER_CACHE = FieldModifierCache()


class ModifiersPreprocessor(Preprocessor):
    """Applies the modifiers declared on the fields of the processed object.

    Objects without declared fields (e.g. plain JSON documents) are left as is.
    A modifier failing on a field is logged and does not stop processing.
    """

    def __init__(
        self,
        registry: Optional[ModifierRegistry] = None,
        cache: Optional[FieldModifierCache] = None,
    ):
        if registry is None:
            from api_validation.preprocessing.trim import TrimModifier

            registry = ModifierRegistry([TrimModifier()])
        self.registry = registry
        self.cache = cache if cache is not None else FIELD_MODIFIER_CACHE

    def process(self, obj: Any, config: "PreprocessingConfig") -> bool:
        if obj is None or isinstance(obj, (dict, list, str, int, float, bool)):
            return True

        field_tags = self.cache.get(type(obj), self.registry.tag_types)
        for field_name, tags in field_tags.items():
            for tag in tags:
                modifier = self.registry.get(type(tag))
                try:
                    modifier.process(obj, field_name, tag)
                except (AttributeError, TypeError, ValueError) as e:
                    logger.warning(
                        f"Could not apply {type(tag).__name__} to field {field_name}: {e}"
                    )

        return True
