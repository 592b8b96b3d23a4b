"""Stamping of the audit field group on documents about to be saved."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from .audit_records import DEFAULT_ID

AUDIT_GROUP_NAME = "audit"
CREATED_BY_FIELD_NAME = "createdBy"
CREATED_AT_FIELD_NAME = "createdAt"
UPDATED_BY_FIELD_NAME = "updatedBy"
UPDATED_AT_FIELD_NAME = "updatedAt"
PUBLISHED_BY_FIELD_NAME = "publishedBy"
PUBLISHED_AT_FIELD_NAME = "publishedAt"
DEFAULT_USERNAME = "System"

_STATUS_FIELD_NAME = "_status"


def stamp_audit_fields(
    data: Mapping[str, Any],
    *,
    user: Mapping[str, Any] | None,
    operation: str | None = None,
    original_doc: Mapping[str, Any] | None = None,
    username_field: str = "email",
    clock: Callable[[], datetime] | None = None,
) -> dict[str, Any]:
    """Return a copy of `data` with the audit group filled for this save.

    Globals save without an operation, which counts as an update. Publication is only
    stamped for a signed-in user, on a create that publishes or on an update that moves
    the document from draft to published.
    """
    resolved_operation = operation or "update"
    now = _iso_timestamp((clock or _utc_now)())
    signature = _user_signature(user, username_field)

    stamped = dict(data)
    audit = dict(stamped.get(AUDIT_GROUP_NAME) or {})

    if resolved_operation == "update":
        audit[UPDATED_BY_FIELD_NAME] = signature
        audit[UPDATED_AT_FIELD_NAME] = now
    if resolved_operation == "create":
        audit[CREATED_BY_FIELD_NAME] = signature
        audit[CREATED_AT_FIELD_NAME] = now

    if user and _is_publishing(resolved_operation, stamped, original_doc):
        audit[PUBLISHED_AT_FIELD_NAME] = now
        audit[PUBLISHED_BY_FIELD_NAME] = signature

    stamped[AUDIT_GROUP_NAME] = audit
    return stamped


def _is_publishing(
    operation: str, data: Mapping[str, Any], original_doc: Mapping[str, Any] | None
) -> bool:
    if data.get(_STATUS_FIELD_NAME) != "published":
        return False
    if operation == "create":
        return True
    previous_status = original_doc.get(_STATUS_FIELD_NAME) if original_doc else None
    return operation == "update" and previous_status == "draft"


def _user_signature(user: Mapping[str, Any] | None, username_field: str) -> str:
    username = (user or {}).get(username_field) or DEFAULT_USERNAME
    user_id = (user or {}).get("id")
    return f"{username} ({user_id if user_id not in (None, '') else DEFAULT_ID})"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
