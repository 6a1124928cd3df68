"""Error types and the error collector for API validation."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from api_validation.constants import (
    MAX_ERROR_STATUS_CODE,
    MIN_ERROR_STATUS_CODE,
    UNPROCESSABLE_ENTITY,
)


class ConfigurationError(Exception):
    """Programming or integration mistake detected during validation.

    Configuration errors abort the current operation. They are never added to
    an error response.
    """


def _check_status_code(status_code: int) -> None:
    if not MIN_ERROR_STATUS_CODE <= status_code <= MAX_ERROR_STATUS_CODE:
        raise ConfigurationError(
            "HTTP status code for an API error response must be in the 4xx or "
            f"5xx range, got {status_code}"
        )


@dataclass(frozen=True)
class ErrorCode:
    """Numeric error code with the HTTP status used when it is reported alone."""

    code: int
    default_status_code: int = UNPROCESSABLE_ENTITY

    def __post_init__(self) -> None:
        _check_status_code(self.default_status_code)


@dataclass(frozen=True)
class LocationType:
    """Kind of location an error points to (e.g. "json" or "header")."""

    location_type: str


@dataclass(frozen=True)
class ApiError:
    """A single error with an optional code and absolute location."""

    message: str
    code: Optional[ErrorCode] = None
    location_type: Optional[LocationType] = None
    location: Optional[str] = None

    @property
    def numeric_code(self) -> Optional[int]:
        return self.code.code if self.code is not None else None

    @property
    def location_type_name(self) -> Optional[str]:
        return self.location_type.location_type if self.location_type else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to its report representation."""
        return {
            "message": self.message,
            "code": self.numeric_code,
            "location": self.location,
            "locationType": self.location_type_name,
        }

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location or 'root'}: {self.message}"


def _location_with_ancestors(location: str) -> List[str]:
    """Return a location and every ancestor, e.g. "/a/b" -> "/a/b", "/a", ""."""
    locations = [location]
    while location:
        location = location.rpartition("/")[0]
        locations.append(location)
    return locations


class ApiErrorResponse:
    """Error collector and report for one validation run.

    Errors are kept in insertion order. Two indexes allow constant-time lookups:
    known locations (every error location and all of its ancestors) and known
    numeric codes. ``None`` is indexed for errors without a location or code.
    """

    def __init__(self, status_code: int):
        _check_status_code(status_code)
        self._status_code = status_code
        self._errors: List[ApiError] = []
        self._known_locations: Set[Optional[str]] = set()
        self._known_codes: Set[Optional[int]] = set()

    @classmethod
    def from_error(
        cls,
        message: str,
        code: ErrorCode,
        location: Optional[str] = None,
        location_type: Optional[LocationType] = None,
    ) -> "ApiErrorResponse":
        """Create a response holding a single error.

        The status code of the response is the default status of the error code.
        """
        response = cls(code.default_status_code)
        response.add_error(ApiError(message, code, location_type, location))
        return response

    def add_error(self, error: ApiError) -> "ApiErrorResponse":
        """Add an error and update the lookup indexes."""
        self._errors.append(error)
        self._known_codes.add(error.numeric_code)

        if error.location is None:
            self._known_locations.add(None)
        else:
            self._known_locations.update(_location_with_ancestors(error.location))

        return self

    def has_errors(self) -> bool:
        """Whether any errors have been collected."""
        return len(self._errors) > 0

    def has_errors_at(self, location: Optional[str]) -> bool:
        """Whether errors were collected at or under the specified location.

        Passing ``None`` checks for errors that have no location.
        """
        return location in self._known_locations

    def has_errors_with_code(self, code: Optional[ErrorCode]) -> bool:
        """Whether errors were collected with the specified code.

        Passing ``None`` checks for errors that have no code.
        """
        return (code.code if code is not None else None) in self._known_codes

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def errors(self) -> Tuple[ApiError, ...]:
        return tuple(self._errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the response to its report representation."""
        return {"errors": [error.to_dict() for error in self._errors]}

    def format_errors(self) -> str:
        """Format all errors into a readable string."""
        return "\n".join(str(error) for error in self._errors)


class ApiErrorsException(Exception):
    """Raised when a preprocessing run collected validation errors."""

    def __init__(self, error_response: ApiErrorResponse):
        self.error_response = error_response
        super().__init__(
            f"{len(error_response.errors)} validation error(s) "
            f"(HTTP {error_response.status_code})"
        )

    @property
    def status_code(self) -> int:
        return self.error_response.status_code
