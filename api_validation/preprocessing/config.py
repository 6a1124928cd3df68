"""Preprocessing configuration and run results."""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from api_validation.constants import DEFAULT_GROUP
from api_validation.context import ValidationContext
from api_validation.errors import (
    ApiError,
    ApiErrorResponse,
    ApiErrorsException,
    ConfigurationError,
)
from api_validation.preprocessing.base import Preprocessor
from api_validation.settings import get_status_code
from api_validation.validators import Validator, ValidatorLike, as_validator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreprocessingResult:
    """Outcome of a preprocessing run."""

    successful: bool
    response: ApiErrorResponse

    @property
    def valid(self) -> bool:
        """Whether processing succeeded without validation errors."""
        return self.successful and not self.response.has_errors()

    @property
    def errors(self) -> Tuple[ApiError, ...]:
        return self.response.errors


class PreprocessingConfig:
    """Configuration of one preprocessing run, and the state of that run.

    The configuration is built with chained calls, then used once::

        person = (
            PreprocessingConfig(default_chain(converter, schemas))
            .validate_with(PersonValidator())
            .process(person)
        )

    :meth:`process` raises :class:`ApiErrorsException` if errors were collected,
    unless ``fail_on_errors(False)`` was called. :meth:`run` never raises for
    validation errors and returns a :class:`PreprocessingResult` instead.

    A configuration cannot be reused: create a new one for each run.
    """

    def __init__(self, preprocessor: Preprocessor, status_code: Optional[int] = None):
        if status_code is None:
            status_code = get_status_code()

        self._preprocessor = preprocessor
        self._error_response = ApiErrorResponse(status_code)
        self._validation_context = ValidationContext(self._error_response)
        self._validation_groups: Tuple[str, ...] = (DEFAULT_GROUP,)
        self._validators: List[Validator] = []
        self._schema: Optional[Mapping[str, Any]] = None
        self._patch_validation = False
        self._fail_on_errors = True
        self._successful: Optional[bool] = None

    def validate_only(self, *groups: str) -> "PreprocessingConfig":
        """Restrict constraint validation to the specified validation groups."""
        self._validation_groups = tuple(groups)
        return self

    def validate_with(self, *validators: ValidatorLike) -> "PreprocessingConfig":
        """Add validators run by the business validation stage, in order."""
        for validator in validators:
            if validator is None:
                raise ConfigurationError("Validator cannot be None")
            self._validators.append(as_validator(validator))
        return self

    def validate_against(self, schema: Mapping[str, Any]) -> "PreprocessingConfig":
        """Use this JSON schema instead of the schemas registered for the object class."""
        self._schema = schema
        return self

    def validate_patch(self) -> "PreprocessingConfig":
        """Enable patch validation: only properties that were set are validated."""
        self._patch_validation = True
        return self

    def with_state(self, state: Any, key: Optional[Any] = None) -> "PreprocessingConfig":
        self._validation_context.add_state(state, key)
        return self

    def with_states(self, *states: Any) -> "PreprocessingConfig":
        self._validation_context.add_states(*states)
        return self

    def fail_on_errors(self, fail_on_errors: bool) -> "PreprocessingConfig":
        self._fail_on_errors = fail_on_errors
        return self

    def process(self, obj: Any) -> Any:
        """Run the preprocessor on an object.

        Returns:
            The processed object

        Raises:
            ConfigurationError: If this configuration was already used
            ApiErrorsException: If errors were collected and the configuration
                fails on errors
        """
        if self._successful is not None:
            raise ConfigurationError("Object has already been processed.")

        logger.debug(f"Preprocessing {type(obj).__name__}")
        self._successful = self._preprocessor.process(obj, self)

        if self._fail_on_errors and self._error_response.has_errors():
            logger.debug(
                f"Preprocessing of {type(obj).__name__} found "
                f"{len(self._error_response.errors)} error(s)"
            )
            raise ApiErrorsException(self._error_response)

        return obj

    def run(self, obj: Any) -> PreprocessingResult:
        """Run the preprocessor on an object and return the outcome."""
        self._fail_on_errors = False
        self.process(obj)
        return PreprocessingResult(self.is_successful(), self._error_response)

    def is_successful(self) -> bool:
        """Whether every preprocessor completed.

        Raises:
            ConfigurationError: If no object has been processed yet
        """
        if self._successful is None:
            raise ConfigurationError("Object has not been processed yet.")
        return self._successful

    def has_errors(self) -> bool:
        return self._error_response.has_errors()

    @property
    def error_response(self) -> ApiErrorResponse:
        return self._error_response

    @property
    def validation_context(self) -> ValidationContext:
        return self._validation_context

    @property
    def validation_groups(self) -> Tuple[str, ...]:
        return self._validation_groups

    @property
    def validators(self) -> List[Validator]:
        return list(self._validators)

    @property
    def schema(self) -> Optional[Mapping[str, Any]]:
        return self._schema

    def is_patch_validation_enabled(self) -> bool:
        return self._patch_validation
