"""Tests for the CLI module."""

import json
import logging
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

from api_validation import __version__
from api_validation.cli import cli

SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
    },
}


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def package_logger() -> Generator[logging.Logger, None, None]:
    """Restore the package logger level after a test."""
    logger = logging.getLogger("api_validation")
    level = logger.level
    yield logger
    logger.setLevel(level)


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    """Write the person schema to a file."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA))
    return path


def write_document(tmp_path: Path, document) -> Path:
    path = tmp_path / "document.json"
    path.write_text(json.dumps(document))
    return path


def test_version(runner: CliRunner) -> None:
    """Test the version option."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_valid_document(runner: CliRunner, tmp_path: Path, schema_file: Path) -> None:
    """Test that a valid document exits with 0 and an empty report."""
    document = write_document(tmp_path, {"name": "Ann", "age": 3})
    result = runner.invoke(cli, ["check", str(document), "--schema", str(schema_file)])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"statusCode": 422, "errors": []}


def test_check_invalid_document(runner: CliRunner, tmp_path: Path, schema_file: Path) -> None:
    """Test that errors are reported with their location and exit code 1."""
    document = write_document(tmp_path, {"age": -1})
    result = runner.invoke(
        cli,
        [
            "check",
            str(document),
            "--schema",
            str(schema_file),
            "--code",
            "required=10",
            "--status-code",
            "400",
        ],
    )
    assert result.exit_code == 1

    report = json.loads(result.output)
    assert report["statusCode"] == 400
    errors = sorted(report["errors"], key=lambda error: error["location"])
    assert [(e["location"], e["code"], e["locationType"]) for e in errors] == [
        ("/age", None, "json"),
        ("/name", 10, "json"),
    ]


def test_check_patch(runner: CliRunner, tmp_path: Path, schema_file: Path) -> None:
    """Test that only properties present in a patch document are validated."""
    document = write_document(tmp_path, {"age": 3})
    result = runner.invoke(
        cli, ["check", str(document), "--schema", str(schema_file), "--patch"]
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["errors"] == []


def test_check_patch_requires_object(
    runner: CliRunner, tmp_path: Path, schema_file: Path
) -> None:
    """Test that a patch document must be a JSON object."""
    document = write_document(tmp_path, [1, 2])
    result = runner.invoke(
        cli, ["check", str(document), "--schema", str(schema_file), "--patch"]
    )
    assert result.exit_code == 2
    assert "must be a JSON object" in result.output


def test_check_invalid_json(runner: CliRunner, tmp_path: Path, schema_file: Path) -> None:
    """Test that an unreadable document is reported."""
    document = tmp_path / "document.json"
    document.write_text("{not json")
    result = runner.invoke(cli, ["check", str(document), "--schema", str(schema_file)])
    assert result.exit_code == 2
    assert "is not valid JSON" in result.output


def test_check_invalid_status_code(
    runner: CliRunner, tmp_path: Path, schema_file: Path
) -> None:
    """Test that the status code must be 4xx or 5xx."""
    document = write_document(tmp_path, {"name": "Ann"})
    result = runner.invoke(
        cli,
        ["check", str(document), "--schema", str(schema_file), "--status-code", "200"],
    )
    assert result.exit_code == 2
    assert "4xx or 5xx" in result.output


def test_check_invalid_code_option(
    runner: CliRunner, tmp_path: Path, schema_file: Path
) -> None:
    """Test that codes must be given as KEYWORD=CODE."""
    document = write_document(tmp_path, {"name": "Ann"})
    result = runner.invoke(
        cli, ["check", str(document), "--schema", str(schema_file), "--code", "required"]
    )
    assert result.exit_code == 2
    assert "KEYWORD=CODE" in result.output


def test_debug_flag(
    runner: CliRunner, tmp_path: Path, schema_file: Path, package_logger: logging.Logger
) -> None:
    """Test that the debug flag enables debug logging."""
    document = write_document(tmp_path, {"name": "Ann"})
    result = runner.invoke(
        cli, ["--debug", "check", str(document), "--schema", str(schema_file)]
    )
    assert result.exit_code == 0
    assert "Debug mode enabled" in result.output
    assert package_logger.level == logging.DEBUG


def test_check_help_describes_report(runner: CliRunner) -> None:
    """Test that the check help documents the keys of the printed report."""
    result = runner.invoke(cli, ["check", "--help"])
    assert result.exit_code == 0
    assert '"statusCode"' in result.output
    assert '"errors"' in result.output
