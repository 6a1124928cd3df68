"""Validation of API input objects with located, aggregated errors."""

__version__ = "0.1.0"

from api_validation.constraints import (
    ConstraintConverter,
    ConstraintValidationContext,
    ConstraintValidator,
    MappingConstraintConverter,
    build_validator_class,
)
from api_validation.context import JSON_LOCATION_TYPE, SingleObjectOrList, ValidationContext
from api_validation.errors import (
    ApiError,
    ApiErrorResponse,
    ApiErrorsException,
    ConfigurationError,
    ErrorCode,
    LocationType,
)
from api_validation.patch import (
    JsonWrapper,
    JsonWrapperDocument,
    PatchDocument,
    PatchObject,
    PatchTransferObject,
)
from api_validation.pointer import JsonPointer
from api_validation.preprocessing import (
    PreprocessingChain,
    PreprocessingConfig,
    PreprocessingResult,
    Preprocessor,
    SchemaRegistry,
    Trim,
    default_chain,
    modifiers,
)
from api_validation.validators import (
    AbstractValidator,
    Validator,
    skip_on_previous_errors,
    skip_on_previous_errors_at_current_location,
)

__all__ = [
    "AbstractValidator",
    "ApiError",
    "ApiErrorResponse",
    "ApiErrorsException",
    "ConfigurationError",
    "ConstraintConverter",
    "ConstraintValidationContext",
    "ConstraintValidator",
    "ErrorCode",
    "JSON_LOCATION_TYPE",
    "JsonPointer",
    "JsonWrapper",
    "JsonWrapperDocument",
    "LocationType",
    "MappingConstraintConverter",
    "PatchDocument",
    "PatchObject",
    "PatchTransferObject",
    "PreprocessingChain",
    "PreprocessingConfig",
    "PreprocessingResult",
    "Preprocessor",
    "SchemaRegistry",
    "SingleObjectOrList",
    "Trim",
    "ValidationContext",
    "Validator",
    "build_validator_class",
    "default_chain",
    "modifiers",
    "skip_on_previous_errors",
    "skip_on_previous_errors_at_current_location",
]
