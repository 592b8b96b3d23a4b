"""Audit field stamping tests."""

from __future__ import annotations

from datetime import UTC, datetime

from audit_diff.audit_logging import AUDIT_GROUP_NAME, stamp_audit_fields

_NOW = datetime(2024, 5, 17, 9, 30, 15, 250000, tzinfo=UTC)
_STAMP = "2024-05-17T09:30:15.250Z"
_USER = {"id": "u-1", "email": "editor@example.com", "username": "ed"}


def _clock() -> datetime:
    return _NOW


def test_create_stamps_created_fields() -> None:
    stamped = stamp_audit_fields(
        {"title": "Hello"}, user=_USER, operation="create", clock=_clock
    )

    assert stamped[AUDIT_GROUP_NAME] == {
        "createdBy": "editor@example.com (u-1)",
        "createdAt": _STAMP,
    }


def test_update_stamps_updated_fields_and_keeps_existing_audit_values() -> None:
    data = {"title": "Hello", "audit": {"createdBy": "someone (u-0)"}}

    stamped = stamp_audit_fields(data, user=_USER, operation="update", clock=_clock)

    assert stamped["audit"] == {
        "createdBy": "someone (u-0)",
        "updatedBy": "editor@example.com (u-1)",
        "updatedAt": _STAMP,
    }
    assert data == {"title": "Hello", "audit": {"createdBy": "someone (u-0)"}}


def test_missing_operation_counts_as_update() -> None:
    stamped = stamp_audit_fields({}, user=None, clock=_clock)

    assert stamped["audit"] == {"updatedBy": "System (-)", "updatedAt": _STAMP}


def test_username_field_is_configurable() -> None:
    stamped = stamp_audit_fields(
        {}, user=_USER, operation="create", username_field="username", clock=_clock
    )

    assert stamped["audit"]["createdBy"] == "ed (u-1)"


def test_publishing_on_create_stamps_publication() -> None:
    stamped = stamp_audit_fields(
        {"_status": "published"}, user=_USER, operation="create", clock=_clock
    )

    assert stamped["audit"]["publishedBy"] == "editor@example.com (u-1)"
    assert stamped["audit"]["publishedAt"] == _STAMP


def test_publishing_from_draft_on_update_stamps_publication() -> None:
    stamped = stamp_audit_fields(
        {"_status": "published"},
        user=_USER,
        operation="update",
        original_doc={"_status": "draft"},
        clock=_clock,
    )

    assert stamped["audit"]["publishedAt"] == _STAMP


def test_republishing_does_not_restamp_publication() -> None:
    stamped = stamp_audit_fields(
        {"_status": "published"},
        user=_USER,
        operation="update",
        original_doc={"_status": "published"},
        clock=_clock,
    )

    assert "publishedAt" not in stamped["audit"]


def test_publication_requires_a_user() -> None:
    stamped = stamp_audit_fields(
        {"_status": "published"}, user=None, operation="create", clock=_clock
    )

    assert "publishedBy" not in stamped["audit"]
    assert stamped["audit"]["createdBy"] == "System (-)"
