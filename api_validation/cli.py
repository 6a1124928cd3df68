"""Command-line interface for API validation."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from api_validation import __version__
from api_validation.constraints import MappingConstraintConverter
from api_validation.context import JSON_LOCATION_TYPE
from api_validation.errors import ConfigurationError, ErrorCode
from api_validation.patch import PatchDocument
from api_validation.preprocessing import PreprocessingConfig, default_chain
from api_validation.settings import load_env_file

logger = logging.getLogger(__name__)


class CheckError(click.ClickException):
    """The check could not run (unreadable input or invalid configuration)."""

    exit_code = 2


def set_debug_logging(debug: bool) -> None:
    """Set debug logging level if debug flag is True."""
    if debug:
        logging.getLogger("api_validation").setLevel(logging.DEBUG)
        click.echo("Debug mode enabled - logging set to DEBUG level", err=True)


def load_json(path: Path) -> Any:
    """Load a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        The decoded JSON value

    Raises:
        CheckError: If the file is not valid JSON
    """
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CheckError(f"{path} is not valid JSON: {e}") from e


def parse_codes(
    ctx: click.Context, param: click.Parameter, values: Tuple[str, ...]
) -> Dict[str, ErrorCode]:
    """Parse KEYWORD=CODE options into error codes keyed by jsonschema keyword."""
    codes: Dict[str, ErrorCode] = {}
    for value in values:
        keyword, sep, code = value.partition("=")
        if not sep or not keyword or not code.strip().isdigit():
            raise click.BadParameter(f"expected KEYWORD=CODE, got {value!r}")
        codes[keyword] = ErrorCode(int(code))
    return codes


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug mode with verbose logging")
def cli(debug: bool) -> None:
    """Validate JSON documents and report located errors."""
    load_env_file()
    set_debug_logging(debug)


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON schema the document must satisfy",
)
@click.option(
    "--patch",
    is_flag=True,
    help="Only validate the top-level properties present in the document",
)
@click.option(
    "--status-code",
    type=int,
    help="HTTP status code of the error response (default: 422)",
)
@click.option(
    "--code",
    "codes",
    multiple=True,
    callback=parse_codes,
    help="Error code of a jsonschema keyword, as KEYWORD=CODE (repeatable)",
)
def check(
    document: Path,
    schema_path: Path,
    patch: bool,
    status_code: Optional[int],
    codes: Dict[str, ErrorCode],
) -> None:
    """Check DOCUMENT against a JSON schema and print the error report.

    The report is a JSON object with the errors under "errors", each with its
    message, code, location and locationType, and the HTTP status code of the
    error response under "statusCode". The exit code is 0 for a valid document,
    1 when errors were found and 2 when the check could not run.
    """
    instance = load_json(document)
    schema = load_json(schema_path)

    if patch:
        if not isinstance(instance, dict):
            raise CheckError("A patch document must be a JSON object")
        instance = PatchDocument(instance)

    converter = MappingConstraintConverter(
        codes=codes, default_location_type=JSON_LOCATION_TYPE
    )

    try:
        config = PreprocessingConfig(default_chain(converter), status_code)
        config.validate_against(schema)
        if patch:
            config.validate_patch()
        result = config.run(instance)
    except (ConfigurationError, ValueError) as e:
        raise CheckError(str(e)) from e

    report = {"statusCode": result.response.status_code}
    report.update(result.response.to_dict())
    click.echo(json.dumps(report, indent=2))

    if not result.valid:
        logger.debug(f"{document} has {len(result.errors)} error(s)")
        click.get_current_context().exit(1)
