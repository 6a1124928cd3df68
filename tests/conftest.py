"""Shared fixtures for the test suite."""

from typing import Generator

import pytest

from api_validation.constants import SCHEMA_DRAFT_ENV_VAR, STATUS_CODE_ENV_VAR
from api_validation.preprocessing.modifiers import FIELD_MODIFIER_CACHE


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run each test without configuration from the environment or a .env file."""
    monkeypatch.delenv(STATUS_CODE_ENV_VAR, raising=False)
    monkeypatch.delenv(SCHEMA_DRAFT_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def modifier_cache() -> Generator[None, None, None]:
    """Clear the process-wide modifier cache around a test."""
    FIELD_MODIFIER_CACHE.clear()
    yield
    FIELD_MODIFIER_CACHE.clear()
