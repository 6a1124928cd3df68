"""Declarative constraints backed by jsonschema.

The constraint stage treats jsonschema as its constraint engine. This module
provides the pieces around it: the converter resolving error codes and
location types from the jsonschema keyword of a violation, custom keywords
implemented as :class:`ConstraintValidator` subclasses, and the builder of the
extended jsonschema validator class.
"""

from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
)

import jsonschema
from jsonschema import validators as jsonschema_validators
from jsonschema.exceptions import ValidationError as SchemaViolation

from api_validation.errors import ConfigurationError, ErrorCode, LocationType
from api_validation.settings import get_schema_draft

RelativePath = Tuple[Any, ...]

SCHEMA_DRAFTS: Dict[str, Type[Any]] = {
    "draft4": jsonschema.Draft4Validator,
    "draft6": jsonschema.Draft6Validator,
    "draft7": jsonschema.Draft7Validator,
    "draft201909": jsonschema.Draft201909Validator,
    "draft202012": jsonschema.Draft202012Validator,
}


class ConstraintConverter(ABC):
    """Resolves the error code and location type of constraint violations.

    Violations are identified by their jsonschema keyword (e.g. "required",
    "maxLength" or a custom keyword). Returning None for the code means the
    error has no code.
    """

    @abstractmethod
    def get_error_code(self, keyword: str) -> Optional[ErrorCode]:
        pass

    @abstractmethod
    def get_error_location_type(self, keyword: str) -> Optional[LocationType]:
        pass


class MappingConstraintConverter(ConstraintConverter):
    """Constraint converter backed by dictionaries keyed by jsonschema keyword."""

    def __init__(
        self,
        codes: Optional[Mapping[str, ErrorCode]] = None,
        location_types: Optional[Mapping[str, LocationType]] = None,
        default_code: Optional[ErrorCode] = None,
        default_location_type: Optional[LocationType] = None,
    ):
        self.codes = dict(codes or {})
        self.location_types = dict(location_types or {})
        self.default_code = default_code
        self.default_location_type = default_location_type

    def get_error_code(self, keyword: str) -> Optional[ErrorCode]:
        return self.codes.get(keyword, self.default_code)

    def get_error_location_type(self, keyword: str) -> Optional[LocationType]:
        return self.location_types.get(keyword, self.default_location_type)


class ConstraintValidationContext:
    """Restricted context passed to :meth:`ConstraintValidator.validate`.

    Locations are relative to the validated value and may only have one level
    ("name" or "/name").
    """

    def __init__(self, default_message: str):
        self._default_message = default_message
        self._violations: List[Tuple[RelativePath, str]] = []

    @property
    def violations(self) -> List[Tuple[RelativePath, str]]:
        return list(self._violations)

    def has_errors(self) -> bool:
        return len(self._violations) > 0

    def add_default_error(self) -> "ConstraintValidationContext":
        """Add the default error of the constraint at the validated value."""
        self._violations.append(((), self._default_message))
        return self

    def add_error_at_current_location(
        self, message: str, *message_args: Any
    ) -> "ConstraintValidationContext":
        self._violations.append(((), _format(message, message_args)))
        return self

    def add_error(
        self, location: str, message: str, *message_args: Any
    ) -> "ConstraintValidationContext":
        """Add an error on a property of the validated value."""
        self._violations.append(
            ((_check_location(location),), _format(message, message_args))
        )
        return self

    def add_array_error(
        self, location: str, index: int, message: str, *message_args: Any
    ) -> "ConstraintValidationContext":
        """Add an error on an element of an array property of the validated value."""
        self._violations.append(
            ((_check_location(location), index), _format(message, message_args))
        )
        return self


def _format(message: str, message_args: Sequence[Any]) -> str:
    return message % tuple(message_args) if message_args else message


def _check_location(location: str) -> str:
    if "." in location:
        raise ConfigurationError(
            "Constraint violation error locations cannot contain dots."
        )
    if location.startswith("/"):
        location = location[1:]
    if "/" in location:
        raise ConfigurationError(
            "Constraint violation error locations cannot contain a slash "
            "except as the first character."
        )
    return location


class ConstraintValidator(ABC):
    """Custom jsonschema keyword.

    Subclasses set :attr:`keyword` and implement :meth:`validate`. The value is
    valid if no errors were added to the context::

        class UniqueItemNames(ConstraintValidator):
            keyword = "uniqueNames"
            instance_type = "object"

            def validate(self, value, keyword_value, context):
                names = [item.get("name") for item in value.get(keyword_value, [])]
                for index, name in enumerate(names):
                    if names.index(name) != index:
                        context.add_array_error(keyword_value, index, "duplicate name %s", name)

    Violations are reported with the keyword as their constraint type, so
    codes are configured on the :class:`ConstraintConverter` under that keyword.
    """

    keyword: str = ""
    #: jsonschema type the keyword applies to, None for any instance
    instance_type: Optional[str] = None

    @abstractmethod
    def validate(
        self, value: Any, keyword_value: Any, context: ConstraintValidationContext
    ) -> None:
        pass

    def default_message(self, value: Any, keyword_value: Any) -> str:
        return f"{value!r} does not satisfy {self.keyword}"

    def __call__(
        self,
        validator: Any,
        keyword_value: Any,
        instance: Any,
        schema: Mapping[str, Any],
    ) -> Iterator[SchemaViolation]:
        if self.instance_type is not None and not validator.is_type(
            instance, self.instance_type
        ):
            return
        context = ConstraintValidationContext(
            self.default_message(instance, keyword_value)
        )
        self.validate(instance, keyword_value, context)
        for path, message in context.violations:
            yield SchemaViolation(message, path=path)


def required_with_location(
    validator: Any, required: Sequence[str], instance: Any, schema: Mapping[str, Any]
) -> Iterator[SchemaViolation]:
    """"required" keyword locating each error at the missing property."""
    if not validator.is_type(instance, "object"):
        return
    for name in required:
        if name not in instance:
            yield SchemaViolation(f"{name!r} is a required property", path=(name,))


def build_validator_class(
    constraints: Sequence[ConstraintValidator] = (),
    base: Optional[Type[Any]] = None,
) -> Type[Any]:
    """Build a jsonschema validator class with location-aware and custom keywords.

    Args:
        constraints: Custom keywords to add
        base: The jsonschema validator class to extend (defaults to the configured draft)

    Returns:
        The extended validator class

    Raises:
        ConfigurationError: If the configured draft is unknown or a keyword is missing
    """
    if base is None:
        draft = get_schema_draft()
        if draft not in SCHEMA_DRAFTS:
            raise ConfigurationError(
                f"Unknown JSON schema draft {draft!r}, expected one of: "
                f"{', '.join(sorted(SCHEMA_DRAFTS))}"
            )
        base = SCHEMA_DRAFTS[draft]

    keywords: Dict[str, Callable[..., Iterator[SchemaViolation]]] = {
        "required": required_with_location
    }
    for constraint in constraints:
        if not constraint.keyword:
            raise ConfigurationError(
                f"Constraint validator {type(constraint).__name__} has no keyword"
            )
        keywords[constraint.keyword] = constraint

    return jsonschema_validators.extend(base, validators=keywords)
