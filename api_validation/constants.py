"""Constants for API validation."""

# HTTP status used for validation failures
UNPROCESSABLE_ENTITY = 422

# Valid range for error response status codes
MIN_ERROR_STATUS_CODE = 400
MAX_ERROR_STATUS_CODE = 599

# Location type of errors added through the validation context
JSON_LOCATION_TYPE_NAME = "json"

# Validation group used when none is targeted
DEFAULT_GROUP = "default"

# Field metadata key holding modifier tags
MODIFIERS_METADATA_KEY = "modifiers"

# Environment variables
STATUS_CODE_ENV_VAR = "API_VALIDATION_STATUS_CODE"
SCHEMA_DRAFT_ENV_VAR = "API_VALIDATION_SCHEMA_DRAFT"
DEFAULT_SCHEMA_DRAFT = "draft7"
