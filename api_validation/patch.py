"""Patch objects and JSON wrappers."""

from abc import ABC, abstractmethod
from typing import Any, FrozenSet, Set, TypeVar

T = TypeVar("T")


class PatchObject(ABC):
    """Object that knows which of its properties were explicitly set.

    With patch validation enabled, only the properties that were set are
    validated. Only top-level properties are supported.
    """

    @abstractmethod
    def is_property_set(self, name: str) -> bool:
        """Whether the property was explicitly set (possibly to None)."""
        pass


class PatchTransferObject(PatchObject):
    """:class:`PatchObject` base class for transfer objects.

    Setters of subclasses mark properties as set. The marked name is the name
    of the property in the validated JSON instance, which for plain objects is
    the attribute name; violations of properties not marked with that exact
    name are ignored in patch mode::

        class PersonTO(PatchTransferObject):
            def set_first_name(self, first_name):
                self.first_name = self.mark_property_as_set("first_name", first_name)

        person = PersonTO()
        person.set_first_name(None)
        person.is_property_set("first_name")   # True
        person.is_property_set("last_name")    # False
    """

    def mark_property_as_set(self, name: str, value: T) -> T:
        """Mark a property as set and return the value, for use as a one-liner."""
        self._set_properties.add(name)
        return value

    def is_property_set(self, name: str) -> bool:
        return name in self._set_properties

    @property
    def set_properties(self) -> FrozenSet[str]:
        return frozenset(self._set_properties)

    @property
    def _set_properties(self) -> Set[str]:
        # dataclass subclasses do not call our __init__
        if "_patch_set_properties" not in self.__dict__:
            self.__dict__["_patch_set_properties"] = set()
        return self.__dict__["_patch_set_properties"]


class PatchDocument(dict, PatchObject):
    """JSON document used as a patch: the properties present in it are the ones set."""

    def is_property_set(self, name: str) -> bool:
        return name in self

    def __repr__(self) -> str:
        return f"PatchDocument({dict.__repr__(self)})"


class JsonWrapper:
    """Marker base class for objects wrapping the actual JSON document.

    Constraint violations on a wrapper have the first fragment of their
    location removed, e.g. an error on ``/person/name`` is reported at ``/name``.
    """


class JsonWrapperDocument(dict, JsonWrapper):
    """JSON document whose single top-level property wraps the actual document."""

    @classmethod
    def wrap(cls, name: str, document: Any) -> "JsonWrapperDocument":
        return cls({name: document})
