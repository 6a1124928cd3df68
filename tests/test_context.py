"""Tests for the validation context."""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from api_validation.context import JSON_LOCATION_TYPE, SingleObjectOrList, ValidationContext
from api_validation.errors import ApiErrorResponse, ConfigurationError, ErrorCode

CODE = ErrorCode(1)


@dataclass
class Child:
    name: Optional[str] = None


@dataclass
class Person:
    name: Optional[str] = None
    children: List[Child] = field(default_factory=list)


def child_validator(child: Child, context: ValidationContext) -> None:
    if not child.name:
        context.add_error("/name", JSON_LOCATION_TYPE, CODE, "name is required")


def person_validator(person: Person, context: ValidationContext) -> None:
    if not person.name:
        context.add_error("name", JSON_LOCATION_TYPE, CODE, "name is required")
    context.validate_objects(person.children, "/children", child_validator)


@pytest.fixture
def response() -> ApiErrorResponse:
    """Create an empty response."""
    return ApiErrorResponse(422)


@pytest.fixture
def context(response: ApiErrorResponse) -> ValidationContext:
    """Create a fresh validation context."""
    return ValidationContext(response)


def locations(response: ApiErrorResponse) -> List[Optional[str]]:
    return [error.location for error in response.errors]


def test_nested_locations(context, response):
    """Test that nested validators report errors relative to their value."""
    person = Person(children=[Child("Ann"), Child(None), Child("")])
    context.validate_object(person, "/person", person_validator)

    assert locations(response) == [
        "/person/name",
        "/person/children/1/name",
        "/person/children/2/name",
    ]
    assert context.current_location == ""


def test_validate_in_place(context, response):
    """Test that None and "" validate at the current location."""
    context.validate_object(Person(), None, person_validator)
    context.validate_object(Person(), "", person_validator)
    assert locations(response) == ["/name", "/name"]


def test_validate_objects_none_list(context, response):
    """Test that a None list is not validated."""
    context.validate_objects(None, "/children", child_validator)
    assert not response.has_errors()


def test_validate_object_or_list(context, response):
    """Test validating either one object or a list of objects."""
    context.validate_object_or_list(SingleObjectOrList.single(Child()), "/child", child_validator)
    context.validate_object_or_list(
        SingleObjectOrList.of_list([Child("a"), Child()]), "/children", child_validator
    )
    assert locations(response) == ["/child/name", "/children/1/name"]


def test_add_error_formats_message(context, response):
    """Test that message arguments are interpolated."""
    context.add_error("/age", JSON_LOCATION_TYPE, CODE, "must be at least %d", 18)
    context.add_error("/rate", JSON_LOCATION_TYPE, CODE, "100% is not allowed")
    assert [error.message for error in response.errors] == [
        "must be at least 18",
        "100% is not allowed",
    ]


def test_add_error_without_location(context, response):
    """Test that a None location gives an error without location."""
    with context.path("person"):
        context.add_error(None, None, None, "global error")
    assert locations(response) == [None]
    assert context.has_errors_at(None)
    assert context.has_errors_with_code(None)


def test_add_error_at_current_location(context, response):
    """Test adding a JSON error at the current location."""
    with context.path("person", 0):
        context.add_error_at_current_location(CODE, "invalid")
    error = response.errors[0]
    assert error.location == "/person/0"
    assert error.location_type == JSON_LOCATION_TYPE
    assert context.has_errors_with_code(CODE)


def test_location_does_not_move_cursor(context):
    """Test that building a location leaves the current location unchanged."""
    with context.path("person"):
        assert context.location("/children/0") == "/person/children/0"
        assert context.location("") == "/person"
        assert context.location(None) is None
        assert context.current_location == "/person"


def test_path_escapes_fragments_and_restores_on_error(context):
    """Test that path() escapes raw fragments and restores the location on exceptions."""
    with pytest.raises(RuntimeError):
        with context.path("a/b"):
            assert context.current_location == "/a~1b"
            raise RuntimeError("boom")
    assert context.current_location == ""


def test_has_errors_at_ancestors(context):
    """Test hierarchical lookups through the context."""
    context.add_error("/person/children/0/name", JSON_LOCATION_TYPE, CODE, "bad")
    assert context.has_errors()
    assert context.has_errors_at("/person/children")
    assert not context.has_errors_at("/person/children/1")


def test_states(context):
    """Test registering and retrieving state objects."""
    person = Person("Ann")
    context.add_state(person)
    context.add_state("tenant-1", key="tenant")
    assert context.get_state(Person) is person
    assert context.get_state("tenant") == "tenant-1"


def test_add_states(context):
    """Test registering several states keyed by their type."""
    context.add_states(Person("Ann"), Child("Bob"))
    assert context.get_state(Child).name == "Bob"


def test_duplicate_state(context):
    """Test that only one state can be registered per key."""
    context.add_state(Person("Ann"))
    with pytest.raises(ConfigurationError):
        context.add_state(Person("Bob"))


def test_missing_state(context):
    """Test that retrieving an unregistered state fails."""
    with pytest.raises(ConfigurationError):
        context.get_state(Person)


def test_independent_contexts():
    """Test that separate contexts do not share errors, locations or states."""
    first = ValidationContext(ApiErrorResponse(422))
    second = ValidationContext(ApiErrorResponse(422))
    first.add_state(Person("Ann"))

    with first.path("person"):
        first.add_error_at_current_location(CODE, "bad")
        assert second.current_location == ""

    assert first.has_errors()
    assert not second.has_errors()
    with pytest.raises(ConfigurationError):
        second.get_state(Person)


def test_current_location_error_inside_validate_object(context, response):
    """Test that an error at "" lands at the location of the validated value."""
    context.validate_object(
        "x",
        "/foo",
        lambda value, ctx: ctx.add_error("", JSON_LOCATION_TYPE, CODE, "msg"),
    )
    assert locations(response) == ["/foo"]


def test_list_errors_in_order(context, response):
    """Test that list elements are validated in order at indexed locations."""
    context.validate_objects(
        ["a", "b", "c"],
        "/items",
        lambda value, ctx: ctx.add_error("/name", JSON_LOCATION_TYPE, CODE, "bad %s", value),
    )
    assert locations(response) == ["/items/0/name", "/items/1/name", "/items/2/name"]
    assert [error.message for error in response.errors] == ["bad a", "bad b", "bad c"]
