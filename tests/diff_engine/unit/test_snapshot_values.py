"""Snapshot value helper tests."""

from __future__ import annotations

import pytest
from audit_diff.diff_engine import (
    MISSING,
    ValueKind,
    classify_value,
    normalize_relationship,
    redact_value,
    values_equal,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (MISSING, ValueKind.ABSENT),
        (None, ValueKind.PRIMITIVE),
        ("text", ValueKind.PRIMITIVE),
        (b"bytes", ValueKind.PRIMITIVE),
        (3.5, ValueKind.PRIMITIVE),
        ([1, 2], ValueKind.SEQUENCE),
        ((1, 2), ValueKind.SEQUENCE),
        ({"a": 1}, ValueKind.STRUCTURE),
    ],
)
def test_classify_value(value: object, expected: ValueKind) -> None:
    assert classify_value(value) is expected


def test_values_equal_ignores_mapping_key_order() -> None:
    assert values_equal({"a": 1, "b": [1, {"c": 2}]}, {"b": [1, {"c": 2}], "a": 1})


def test_values_equal_detects_nested_difference() -> None:
    assert not values_equal({"a": [1, {"c": 2}]}, {"a": [1, {"c": 3}]})
    assert not values_equal([1, 2], [1, 2, 3])
    assert not values_equal({"a": 1}, {"a": 1, "b": 2})


def test_values_equal_keeps_booleans_apart_from_numbers() -> None:
    assert not values_equal(True, 1)
    assert not values_equal(0, False)
    assert values_equal(1, 1.0)


def test_values_equal_distinguishes_missing_from_null() -> None:
    assert values_equal(MISSING, MISSING)
    assert not values_equal(MISSING, None)


def test_values_equal_terminates_on_cycles() -> None:
    left: list = [1]
    left.append(left)
    right: list = [1]
    right.append(right)

    assert values_equal(left, right)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("u1", "u1"),
        (None, None),
        ({"id": "u1", "email": "a@x.com"}, "u1"),
        ([{"id": "u1"}, "u2", {"id": "u3"}], ["u1", "u2", "u3"]),
        ({"relationTo": "users", "value": {"id": "u4"}}, "u4"),
        ({"relationTo": "users", "value": "u5"}, "u5"),
        ({"name": "no-id"}, {"name": "no-id"}),
    ],
)
def test_normalize_relationship(value: object, expected: object) -> None:
    assert normalize_relationship(value) == expected


def test_normalize_relationship_leaves_missing_untouched() -> None:
    assert normalize_relationship(MISSING) is MISSING


def test_redact_value_walks_nested_mappings_and_sequences() -> None:
    value = {
        "items": [{"password": "p", "name": "a"}, ("x", {"token": "t"})],
        "nested": {"apiKey": {"deep": 1}, "keep": True},
    }

    redacted = redact_value(value, {"password", "token", "apiKey"}, "REDACTED")

    assert redacted == {
        "items": [{"password": "REDACTED", "name": "a"}, ["x", {"token": "REDACTED"}]],
        "nested": {"apiKey": "REDACTED", "keep": True},
    }
    assert value["items"][0]["password"] == "p"


def test_redact_value_returns_primitives_unchanged() -> None:
    assert redact_value("password", {"password"}, "REDACTED") == "password"
    assert redact_value(None, {"password"}, "REDACTED") is None


def test_redact_value_terminates_on_cycles() -> None:
    value: dict = {"secret": "s"}
    value["self"] = value

    redacted = redact_value(value, {"secret"}, "REDACTED")

    assert redacted == {"secret": "REDACTED", "self": "REDACTED"}
