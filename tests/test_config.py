"""Tests for the preprocessing configuration."""

from typing import Any, List

import pytest

from api_validation.constants import STATUS_CODE_ENV_VAR
from api_validation.context import ValidationContext
from api_validation.errors import ApiErrorsException, ConfigurationError, ErrorCode
from api_validation.preprocessing.base import PreprocessingChain, Preprocessor
from api_validation.preprocessing.config import PreprocessingConfig, PreprocessingResult
from api_validation.preprocessing.validation import ValidationPreprocessor

CODE = ErrorCode(1)


class Tenant:
    def __init__(self, name: str):
        self.name = name


def reject_empty_name(value: dict, context: ValidationContext) -> None:
    if not value.get("name"):
        context.add_error_at_current_location(CODE, "name is empty")


class StaticPreprocessor(Preprocessor):
    def __init__(self, result: bool):
        self.result = result

    def process(self, obj: Any, config: PreprocessingConfig) -> bool:
        return self.result


@pytest.fixture
def config() -> PreprocessingConfig:
    """Create a configuration running the business validators."""
    return PreprocessingConfig(ValidationPreprocessor())


def test_defaults(config):
    """Test the default configuration."""
    assert config.validation_groups == ("default",)
    assert config.validators == []
    assert config.schema is None
    assert not config.is_patch_validation_enabled()
    assert config.error_response.status_code == 422
    assert not config.has_errors()


def test_builder_returns_config(config):
    """Test that builder methods can be chained."""
    schema = {"type": "object"}
    assert (
        config.validate_only("create")
        .validate_with(reject_empty_name)
        .validate_against(schema)
        .validate_patch()
        .with_state(Tenant("acme"))
        .with_states("x")
        .fail_on_errors(False)
        is config
    )
    assert config.validation_groups == ("create",)
    assert config.schema is schema
    assert config.is_patch_validation_enabled()
    assert config.validation_context.get_state(str) == "x"


def test_process_returns_valid_object(config):
    """Test that a valid object is returned."""
    document = {"name": "Ann"}
    assert config.validate_with(reject_empty_name).process(document) is document
    assert config.is_successful()
    assert not config.has_errors()


def test_process_raises_on_errors(config):
    """Test that errors are raised by default."""
    config.validate_with(reject_empty_name)
    with pytest.raises(ApiErrorsException) as exc_info:
        config.process({"name": ""})
    assert exc_info.value.status_code == 422
    assert exc_info.value.error_response is config.error_response
    assert config.is_successful()


def test_process_without_failing_on_errors(config):
    """Test that errors are kept in the response when not failing on errors."""
    config.validate_with(reject_empty_name).fail_on_errors(False)
    config.process({"name": ""})
    assert config.has_errors()
    assert [error.location for error in config.error_response.errors] == [""]


def test_run_returns_result(config):
    """Test that run reports errors without raising."""
    result = config.validate_with(reject_empty_name).run({})
    assert isinstance(result, PreprocessingResult)
    assert result.successful
    assert not result.valid
    assert [error.message for error in result.errors] == ["name is empty"]


def test_configuration_is_single_use(config):
    """Test that a configuration cannot process a second object."""
    config.process({})
    with pytest.raises(ConfigurationError):
        config.process({})


def test_is_successful_before_processing(config):
    """Test that the outcome is unknown before processing."""
    with pytest.raises(ConfigurationError):
        config.is_successful()


def test_none_validator(config):
    """Test that None is not accepted as a validator."""
    with pytest.raises(ConfigurationError):
        config.validate_with(reject_empty_name, None)


def test_validators_run_in_order(config):
    """Test that validators run in the order they were added."""
    calls: List[str] = []
    config.validate_with(
        lambda value, context: calls.append("first"),
        lambda value, context: calls.append("second"),
    )
    config.validate_with(lambda value, context: calls.append("third"))
    config.process({})
    assert calls == ["first", "second", "third"]


def test_validators_read_states(config):
    """Test that validators can use the states of the configuration."""
    seen: List[str] = []
    config.with_state(Tenant("acme"))
    config.validate_with(
        lambda value, context: seen.append(context.get_state(Tenant).name)
    )
    config.process({})
    assert seen == ["acme"]


def test_unsuccessful_preprocessor():
    """Test that a preprocessor returning False makes processing unsuccessful."""
    result = PreprocessingConfig(StaticPreprocessor(False)).run({})
    assert not result.successful
    assert not result.valid


def test_stopped_chain_still_raises_collected_errors():
    """Test that errors collected before the chain stopped are reported."""
    chain = PreprocessingChain(ValidationPreprocessor(), StaticPreprocessor(False))
    config = PreprocessingConfig(chain).validate_with(reject_empty_name)
    with pytest.raises(ApiErrorsException):
        config.process({})
    assert not config.is_successful()


def test_explicit_status_code():
    """Test a custom status code for the error response."""
    config = PreprocessingConfig(ValidationPreprocessor(), 400)
    assert config.error_response.status_code == 400


def test_status_code_from_environment(monkeypatch):
    """Test that the default status code can be configured."""
    monkeypatch.setenv(STATUS_CODE_ENV_VAR, "400")
    assert PreprocessingConfig(ValidationPreprocessor()).error_response.status_code == 400


def test_invalid_status_code():
    """Test that the status code must be 4xx or 5xx."""
    with pytest.raises(ConfigurationError):
        PreprocessingConfig(ValidationPreprocessor(), 200)


def test_independent_runs():
    """Test that separate configurations do not share errors."""
    first = PreprocessingConfig(ValidationPreprocessor()).validate_with(reject_empty_name)
    second = PreprocessingConfig(ValidationPreprocessor()).validate_with(reject_empty_name)
    assert not first.run({}).valid
    assert second.run({"name": "Ann"}).valid
