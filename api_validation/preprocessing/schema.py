"""Constraint validation stage backed by JSON schemas."""

import dataclasses
import logging
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
)

from jsonschema.exceptions import SchemaError

from api_validation.constants import DEFAULT_GROUP
from api_validation.constraints import (
    ConstraintConverter,
    ConstraintValidator,
    build_validator_class,
)
from api_validation.errors import ConfigurationError
from api_validation.patch import JsonWrapper, PatchObject
from api_validation.pointer import JsonPointer, unescape_fragment
from api_validation.preprocessing.base import Preprocessor

if TYPE_CHECKING:
    from api_validation.context import ValidationContext
    from api_validation.preprocessing.config import PreprocessingConfig

logger = logging.getLogger(__name__)

Schema = Mapping[str, Any]


class SchemaRegistry:
    """JSON schemas of object classes, by validation group."""

    def __init__(self) -> None:
        self._schemas: Dict[Tuple[Type, str], Schema] = {}

    def register(
        self, shape: Type, schema: Schema, groups: Sequence[str] = (DEFAULT_GROUP,)
    ) -> "SchemaRegistry":
        """Register the schema validating instances of a class in the specified groups."""
        for group in groups:
            self._schemas[(shape, group)] = schema
        return self

    def lookup(self, shape: Type, groups: Iterable[str]) -> List[Schema]:
        """Return the distinct schemas registered for a class in any of the groups.

        For each group, the schema of the closest class in the MRO is used, so
        subclasses (e.g. :class:`PatchDocument` for ``dict``) share the schema
        of their base class unless they have their own.
        """
        schemas: List[Schema] = []
        for group in groups:
            schema = self._lookup_group(shape, group)
            if schema is not None and not any(schema is s for s in schemas):
                schemas.append(schema)
        return schemas

    def _lookup_group(self, shape: Type, group: str) -> Optional[Schema]:
        for klass in shape.__mro__:
            schema = self._schemas.get((klass, group))
            if schema is not None:
                return schema
        return None


def to_json_instance(obj: Any) -> Any:
    """Convert an object to the JSON-shaped value checked by the schema.

    Conversion is recursive: dataclasses become dicts of their fields, objects
    with a ``to_dict`` method become its result, and other objects become dicts
    of their public attributes. Values without attributes (decimals, dates) are
    kept as they are.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return to_json_instance(obj.value)
    if isinstance(obj, Mapping):
        return {key: to_json_instance(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_instance(item) for item in obj]
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            field.name: to_json_instance(getattr(obj, field.name))
            for field in dataclasses.fields(obj)
        }
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_json_instance(to_dict())
    if not hasattr(obj, "__dict__"):
        return obj
    return {
        name: to_json_instance(value)
        for name, value in vars(obj).items()
        if not name.startswith("_")
    }


class ConstraintPreprocessor(Preprocessor):
    """Checks the processed object against its JSON schemas.

    Each schema violation is added to the validation context at the location
    of the invalid value. The error code and location type are resolved by the
    constraint converter from the jsonschema keyword of the violation.

    If the object is a :class:`JsonWrapper`, the first fragment of error
    locations is removed: an error on ``/person/name`` is reported at ``/name``.

    With patch validation, the object must be a :class:`PatchObject` and only
    violations of the properties it marks as set are reported. Deep patch
    validation is not supported: only the first location fragment is checked.
    """

    def __init__(
        self,
        converter: Optional[ConstraintConverter] = None,
        schemas: Optional[SchemaRegistry] = None,
        constraints: Sequence[ConstraintValidator] = (),
        validator_class: Optional[Type[Any]] = None,
    ):
        self.converter = converter
        self.schemas = schemas if schemas is not None else SchemaRegistry()
        self.validator_class = validator_class or build_validator_class(constraints)

    def process(self, obj: Any, config: "PreprocessingConfig") -> bool:
        if self.converter is None:
            raise ConfigurationError("No constraint converter is configured.")

        patch: Optional[PatchObject] = None
        if config.is_patch_validation_enabled():
            if not isinstance(obj, PatchObject):
                raise ConfigurationError(
                    "The preprocessing configuration indicates that patch validation "
                    "is enabled but the processed object is not an instance of "
                    f"{PatchObject.__name__} (got {type(obj).__name__})"
                )
            patch = obj

        schemas = self._resolve_schemas(obj, config)
        if not schemas:
            logger.debug(f"No schema to validate {type(obj).__name__} against")
            return True

        instance = to_json_instance(obj)
        context = config.validation_context
        pointer = JsonPointer()

        for schema in schemas:
            try:
                self.validator_class.check_schema(schema)
            except SchemaError as e:
                raise ConfigurationError(f"Invalid JSON schema: {e.message}") from e

            for violation in self.validator_class(schema).iter_errors(instance):
                pointer.reset()
                for part in violation.absolute_path:
                    pointer.push(part)

                if patch is not None and not self._is_set(patch, pointer):
                    logger.debug(f"Ignoring violation of unset property at {pointer}")
                    continue

                if isinstance(obj, JsonWrapper):
                    pointer.pop_first()

                self._add_error(context, violation.validator, violation.message, pointer)

        return True

    def _resolve_schemas(self, obj: Any, config: "PreprocessingConfig") -> List[Schema]:
        if config.schema is not None:
            return [config.schema]
        return self.schemas.lookup(type(obj), config.validation_groups)

    @staticmethod
    def _is_set(patch: PatchObject, pointer: JsonPointer) -> bool:
        # violations of the whole document cannot be attributed to a property
        if pointer.is_root():
            return True
        return patch.is_property_set(unescape_fragment(pointer.fragment_at(0)))

    def _add_error(
        self,
        context: "ValidationContext",
        keyword: str,
        message: str,
        pointer: JsonPointer,
    ) -> None:
        context.add_error(
            str(pointer),
            self.converter.get_error_location_type(keyword),
            self.converter.get_error_code(keyword),
            message,
        )
