"""Snapshot value classification, equality, relationship normalization and redaction."""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from enum import Enum
from typing import Any


class _Missing:
    """Marker for a key that is absent from a snapshot."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ValueKind(str, Enum):
    """Shape of one snapshot value."""

    ABSENT = "absent"
    PRIMITIVE = "primitive"
    SEQUENCE = "sequence"
    STRUCTURE = "structure"


def classify_value(value: Any) -> ValueKind:
    """Return the tagged kind of a snapshot value."""
    if value is MISSING:
        return ValueKind.ABSENT
    if isinstance(value, Mapping):
        return ValueKind.STRUCTURE
    if isinstance(value, (str, bytes, bytearray)):
        return ValueKind.PRIMITIVE
    if isinstance(value, Sequence):
        return ValueKind.SEQUENCE
    return ValueKind.PRIMITIVE


def values_equal(left: Any, right: Any) -> bool:
    """Compare two snapshot values structurally.

    Mapping key order is irrelevant, booleans never equal numbers, and pairs of
    containers already under comparison are treated as equal so cyclic values terminate.
    The walk uses an explicit stack and never recurses.
    """
    pending: list[tuple[Any, Any]] = [(left, right)]
    compared: set[tuple[int, int]] = set()
    while pending:
        current_left, current_right = pending.pop()
        if current_left is current_right:
            continue
        left_kind = classify_value(current_left)
        if left_kind is not classify_value(current_right):
            return False
        if left_kind is ValueKind.PRIMITIVE:
            if not _primitives_equal(current_left, current_right):
                return False
            continue
        if left_kind is ValueKind.ABSENT:
            continue

        pair = (id(current_left), id(current_right))
        if pair in compared:
            continue
        compared.add(pair)
        if left_kind is ValueKind.STRUCTURE:
            if current_left.keys() != current_right.keys():
                return False
            pending.extend((current_left[key], current_right[key]) for key in current_left)
        else:
            if len(current_left) != len(current_right):
                return False
            pending.extend(zip(current_left, current_right))
    return True


def _primitives_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        return False


def normalize_relationship(value: Any) -> Any:
    """Reduce a relationship reference to its identifier, or a list of identifiers."""
    kind = classify_value(value)
    if kind is ValueKind.SEQUENCE:
        return [_reference_id(item) for item in value]
    return _reference_id(value)


def _reference_id(reference: Any) -> Any:
    if not isinstance(reference, Mapping):
        return reference
    if "id" in reference:
        return reference["id"]
    # polymorphic references: {"relationTo": "users", "value": "u1" | {"id": "u1"}}
    if "relationTo" in reference and "value" in reference:
        return _reference_id(reference["value"])
    return reference


def redact_value(value: Any, keys: Collection[str], marker: str) -> Any:
    """Return a copy of `value` with every mapping entry named in `keys` replaced by `marker`.

    Mappings and sequences are walked at any depth; other values are returned unchanged.
    A container that contains itself is replaced by the marker where it recurs.
    """
    return _redact(value, keys, marker, active=set())


def _redact(value: Any, keys: Collection[str], marker: str, *, active: set[int]) -> Any:
    kind = classify_value(value)
    if kind not in (ValueKind.STRUCTURE, ValueKind.SEQUENCE):
        return value
    if id(value) in active:
        return marker
    active.add(id(value))
    try:
        if kind is ValueKind.SEQUENCE:
            return [_redact(item, keys, marker, active=active) for item in value]
        return {
            key: marker if key in keys else _redact(item, keys, marker, active=active)
            for key, item in value.items()
        }
    finally:
        active.discard(id(value))
