"""Environment configuration for API validation."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from api_validation.constants import (
    DEFAULT_SCHEMA_DRAFT,
    SCHEMA_DRAFT_ENV_VAR,
    STATUS_CODE_ENV_VAR,
    UNPROCESSABLE_ENTITY,
)


def load_env_file(env_file: Optional[Path] = None) -> None:
    """Load environment variables from a .env file.

    Values already present in the environment take precedence over the file.

    Args:
        env_file: Optional path to the .env file (defaults to ./.env)
    """
    env_path = env_file or Path(".env")
    if env_path.exists():
        load_dotenv(env_path)


def get_status_code() -> int:
    """Get the HTTP status code used for validation error responses.

    Returns:
        The configured status code, or 422 if not configured

    Raises:
        ValueError: If the configured value is not an integer
    """
    load_env_file()
    value = os.getenv(STATUS_CODE_ENV_VAR)
    if value is None or not value.strip():
        return UNPROCESSABLE_ENTITY
    try:
        return int(value)
    except ValueError:
        raise ValueError(
            f"{STATUS_CODE_ENV_VAR} must be an integer, got {value!r}"
        ) from None


def get_schema_draft() -> str:
    """Get the name of the JSON schema draft used by the constraint stage."""
    load_env_file()
    return os.getenv(SCHEMA_DRAFT_ENV_VAR, DEFAULT_SCHEMA_DRAFT).strip().lower()
