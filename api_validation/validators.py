"""Base validators and the skip-on-previous-errors policy."""

from abc import ABC, abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    FrozenSet,
    Generic,
    Set,
    Type,
    TypeVar,
    Union,
)

if TYPE_CHECKING:
    from api_validation.context import ValidationContext

T = TypeVar("T")
V = TypeVar("V", bound=type)

# Class attribute holding the locations declared with the skip decorators
_DECLARED_LOCATIONS_ATTR = "_declared_skip_locations"


class Validator(ABC, Generic[T]):
    """Unit of validation logic adding errors to a validation context."""

    @abstractmethod
    def collect_errors(self, value: T, context: "ValidationContext") -> None:
        """Validate a value, adding any errors to the context."""
        pass


class FunctionValidator(Validator[T]):
    """Validator delegating to a plain function taking (value, context)."""

    def __init__(self, function: Callable[[T, "ValidationContext"], None]):
        self.function = function

    def collect_errors(self, value: T, context: "ValidationContext") -> None:
        self.function(value, context)

    def __repr__(self) -> str:
        name = getattr(self.function, "__qualname__", repr(self.function))
        return f"FunctionValidator({name})"


ValidatorLike = Union[Validator, Callable[[Any, "ValidationContext"], None]]


def as_validator(validator: ValidatorLike) -> Validator:
    """Return the validator itself, or wrap a function in a :class:`FunctionValidator`."""
    if isinstance(validator, Validator):
        return validator
    if callable(validator):
        return FunctionValidator(validator)
    raise TypeError(f"Expected a validator or a function, got {type(validator).__name__}")


def skip_on_previous_errors(*locations: str) -> Callable[[V], V]:
    """Class decorator skipping validation if errors exist at relative locations.

    Example:
        @skip_on_previous_errors("/name", "/email")
        class UserValidator(AbstractValidator):
            ...
    """

    def decorate(cls: V) -> V:
        declared = frozenset(cls.__dict__.get(_DECLARED_LOCATIONS_ATTR, frozenset()))
        setattr(cls, _DECLARED_LOCATIONS_ATTR, declared | frozenset(locations))
        return cls

    return decorate


def skip_on_previous_errors_at_current_location(cls: V) -> V:
    """Class decorator skipping validation if errors exist at the current location."""
    return skip_on_previous_errors("")(cls)


def declared_skip_locations(cls: Type) -> FrozenSet[str]:
    """Return the skip locations declared on a validator class and its bases."""
    locations: Set[str] = set()
    for klass in cls.__mro__:
        locations.update(klass.__dict__.get(_DECLARED_LOCATIONS_ATTR, ()))
    return frozenset(locations)


class AbstractValidator(Validator[T]):
    """Validator that can skip its validation when related locations already have errors.

    Implement :meth:`validate` instead of :meth:`collect_errors`. Before
    ``validate`` is called, every location returned by
    :meth:`previous_error_locations` is resolved against the current location;
    if any of them already has errors, validation is skipped. This avoids
    costly checks (e.g. database lookups) on values known to be invalid.

    Locations are relative JSON Pointers. ``""`` is the current location.
    They can be declared with the :func:`skip_on_previous_errors` and
    :func:`skip_on_previous_errors_at_current_location` class decorators, or
    added at runtime::

        context.validate_object(
            value.address, "/address", AddressValidator().skip_on_previous_errors("/zip")
        )

    Override :meth:`previous_error_locations` when the locations depend on the
    data; the override replaces the declared locations.
    """

    @abstractmethod
    def validate(self, value: T, context: "ValidationContext") -> None:
        """Validate a value. Not called when validation is skipped."""
        pass

    def collect_errors(self, value: T, context: "ValidationContext") -> None:
        for relative_location in self.previous_error_locations(context):
            if context.has_errors_at(context.location(relative_location)):
                return

        self.validate(value, context)

    def previous_error_locations(self, context: "ValidationContext") -> Set[str]:
        """Return the relative locations that cause validation to be skipped."""
        return set(declared_skip_locations(type(self))) | self._added_skip_locations

    def skip_on_previous_errors(self, *locations: str) -> "AbstractValidator[T]":
        """Add locations that cause validation to be skipped. Returns this validator."""
        self._added_skip_locations.update(locations)
        return self

    @property
    def _added_skip_locations(self) -> Set[str]:
        if "_skip_locations" not in self.__dict__:
            self.__dict__["_skip_locations"] = set()
        return self.__dict__["_skip_locations"]
