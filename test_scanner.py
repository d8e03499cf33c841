"""
Test Placeholder Scanner
========================

Checks placeholder location and malformed-value classification.
"""

import pytest

from envcontext.resolution.scanner import (
    Placeholder,
    is_malformed,
    is_valid_name,
    iter_placeholders,
    scan,
)


def test_scan_finds_placeholders_left_to_right():
    value = "https://${HOST}:2024/${USERNAME}:${PASSWORD}"
    result = scan(value)

    assert not result.malformed
    assert [p.name for p in result.placeholders] == ["HOST", "USERNAME", "PASSWORD"]

    first = result.placeholders[0]
    assert first == Placeholder(name="HOST", start=8, end=15)
    assert value[first.start:first.end] == "${HOST}"


def test_scan_plain_value_has_no_placeholders():
    result = scan("plain value")
    assert not result.malformed
    assert not result.has_placeholders


def test_iter_placeholders_is_lazy():
    placeholders = iter_placeholders("${A}${B}")
    assert next(placeholders).name == "A"
    assert next(placeholders).name == "B"
    with pytest.raises(StopIteration):
        next(placeholders)


@pytest.mark.parametrize("value", [
    "${",
    "${}",
    "${   }",
    "prefix ${NAME",
    "${GOOD} and ${}",
    "${GOOD} then ${BAD",
])
def test_malformed_values(value):
    result = scan(value)
    assert result.malformed
    assert result.placeholders == ()
    assert is_malformed(value)


@pytest.mark.parametrize("value", [
    "$HOME",
    "{NAME}",
    "cost: $5",
    "${A}-${B}",
])
def test_well_formed_values(value):
    assert not is_malformed(value)


def test_placeholder_names_are_taken_verbatim():
    # Grammar checks happen in the engine; the scanner only finds tokens
    result = scan("${ spaced }${a.b}")
    assert [p.name for p in result.placeholders] == [" spaced ", "a.b"]


@pytest.mark.parametrize("name,valid", [
    ("KEY", True),
    ("_private", True),
    ("db-host", True),
    ("KEY_2", True),
    ("2KEY", False),
    ("-KEY", False),
    ("KEY NAME", False),
    ("user.home", False),
    ("", False),
])
def test_name_grammar(name, valid):
    assert is_valid_name(name) is valid
