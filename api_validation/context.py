"""Validation context tracking errors and the current location."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from api_validation.constants import JSON_LOCATION_TYPE_NAME
from api_validation.errors import (
    ApiError,
    ApiErrorResponse,
    ConfigurationError,
    ErrorCode,
    LocationType,
)
from api_validation.pointer import Fragment, JsonPointer
from api_validation.validators import ValidatorLike, as_validator

T = TypeVar("T")

JSON_LOCATION_TYPE = LocationType(JSON_LOCATION_TYPE_NAME)


@dataclass(frozen=True)
class SingleObjectOrList(Generic[T]):
    """Value that is either a single object or a list of objects."""

    is_single_object: bool
    single_object: Optional[T] = None
    values: Optional[List[T]] = None

    @classmethod
    def single(cls, value: T) -> "SingleObjectOrList[T]":
        return cls(is_single_object=True, single_object=value)

    @classmethod
    def of_list(cls, values: Optional[List[T]]) -> "SingleObjectOrList[T]":
        return cls(is_single_object=False, values=values)


class ValidationContext:
    """Control object keeping track of errors and their location during validation.

    The context forwards errors to an :class:`ApiErrorResponse` and keeps the
    current location as a :class:`JsonPointer`, initially pointing to the root
    of the document. ``validate_object(s)`` run a validator at a location
    relative to the current one, so nested validators report errors relative to
    the value they receive.

    A context also holds state objects (at most one per key) that validators
    can use to share data with each other and with the caller.

    A context is not thread-safe; create one per validation run.
    """

    def __init__(self, collector: ApiErrorResponse):
        self._collector = collector
        self._current_location = JsonPointer()
        self._states: Dict[Any, Any] = {}

    @property
    def collector(self) -> ApiErrorResponse:
        return self._collector

    @property
    def current_location(self) -> str:
        return str(self._current_location)

    def add_error(
        self,
        location: Optional[str],
        location_type: Optional[LocationType],
        code: Optional[ErrorCode],
        message: str,
        *message_args: Any,
    ) -> "ValidationContext":
        """Add an error at a location relative to the current location.

        Args:
            location: Relative location ("" for the current location, None for no location)
            location_type: The type of location
            code: The error code
            message: The error message, "%" formatted with the message arguments
            *message_args: Arguments interpolated into the message

        Returns:
            This context
        """
        if message_args:
            message = message % message_args
        self._collector.add_error(
            ApiError(message, code, location_type, self.location(location))
        )
        return self

    def add_error_at_current_location(
        self, code: Optional[ErrorCode], message: str, *message_args: Any
    ) -> "ValidationContext":
        """Add a JSON error at the current location."""
        return self.add_error("", JSON_LOCATION_TYPE, code, message, *message_args)

    def has_errors(self) -> bool:
        return self._collector.has_errors()

    def has_errors_at(self, location: Optional[str]) -> bool:
        """Whether errors were added at or under an absolute location."""
        return self._collector.has_errors_at(location)

    def has_errors_with_code(self, code: Optional[ErrorCode]) -> bool:
        return self._collector.has_errors_with_code(code)

    def location(self, relative_location: Optional[str]) -> Optional[str]:
        """Build the absolute location of a path relative to the current location.

        ``None`` returns ``None`` and ``""`` returns the current location. The
        current location is left unchanged.
        """
        if relative_location is None:
            return None
        if relative_location == "":
            return str(self._current_location)

        n = self._current_location.push_many(relative_location)
        location = str(self._current_location)
        self._current_location.pop_n(n)
        return location

    def validate_object(
        self, value: T, relative_location: Optional[str], validator: ValidatorLike
    ) -> "ValidationContext":
        """Validate a value at a location relative to the current location.

        ``None`` or ``""`` validates in place. The current location is restored
        once the validator returns.
        """
        n = self._current_location.push_many(relative_location)
        as_validator(validator).collect_errors(value, self)
        self._current_location.pop_n(n)
        return self

    def validate_objects(
        self,
        values: Optional[List[T]],
        relative_location: Optional[str],
        validator: ValidatorLike,
    ) -> "ValidationContext":
        """Validate each value of a list at ``<relative_location>/<index>``.

        Nothing is done if the list is ``None``.
        """
        if values is None:
            return self

        validator = as_validator(validator)
        n = self._current_location.push_many(relative_location)
        for index, value in enumerate(values):
            self._current_location.push(index)
            validator.collect_errors(value, self)
            self._current_location.pop()
        self._current_location.pop_n(n)
        return self

    def validate_object_or_list(
        self,
        single_object_or_list: SingleObjectOrList[T],
        relative_location: Optional[str],
        validator: ValidatorLike,
    ) -> "ValidationContext":
        if single_object_or_list.is_single_object:
            return self.validate_object(
                single_object_or_list.single_object, relative_location, validator
            )
        return self.validate_objects(
            single_object_or_list.values, relative_location, validator
        )

    @contextmanager
    def path(self, *fragments: Fragment) -> Iterator["ValidationContext"]:
        """Context manager moving the current location into nested fragments.

        Fragments are raw property names or indices; they are escaped.
        """
        for fragment in fragments:
            self._current_location.push(fragment)
        try:
            yield self
        finally:
            self._current_location.pop_n(len(fragments))

    def add_state(self, state: Any, key: Optional[Any] = None) -> "ValidationContext":
        """Register a state object that validators can retrieve with :meth:`get_state`.

        Args:
            state: The state object
            key: The key identifying the state (defaults to the type of the state)

        Raises:
            ConfigurationError: If a state is already registered for that key
        """
        if key is None:
            key = type(state)
        if key in self._states:
            raise ConfigurationError(
                f"A state object is already registered for {_key_name(key)}"
            )
        self._states[key] = state
        return self

    def add_states(self, *states: Any) -> "ValidationContext":
        """Register state objects, each identified by its concrete type."""
        for state in states:
            self.add_state(state)
        return self

    def get_state(self, key: Type[T]) -> T:
        """Return the state object registered for a key.

        Raises:
            ConfigurationError: If no state is registered for that key
        """
        if key not in self._states:
            raise ConfigurationError(
                f"No state object registered for {_key_name(key)}"
            )
        return self._states[key]


def _key_name(key: Any) -> str:
    if isinstance(key, type):
        return f"class {key.__module__}.{key.__qualname__}"
    return repr(key)
