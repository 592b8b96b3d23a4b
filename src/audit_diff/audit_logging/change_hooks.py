"""Audit entry construction for collection and global change events."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from audit_diff.diff_engine import DiffSettings, compute_audit_diff
from audit_diff.field_metadata.policy_models import SchemaField

from .audit_records import DEFAULT_ID, AuditActionType, AuditLogEntry, AuditType, AuditUser


def audit_collection_change(
    *,
    slug: str,
    fields: Sequence[SchemaField],
    doc: Mapping[str, Any],
    previous_doc: Mapping[str, Any] | None,
    operation: str,
    user: AuditUser | None = None,
    settings: DiffSettings | None = None,
) -> AuditLogEntry:
    """Build the audit entry for a created or updated collection document."""
    diff = compute_audit_diff(previous_doc, doc, fields, settings=settings)
    if operation == AuditActionType.CREATE.value:
        action = AuditActionType.CREATE
        data: dict[str, Any] = {"after": diff.after}
    else:
        action = AuditActionType.UPDATE
        data = {"before": diff.before, "after": diff.after}
    return _build_entry(slug, AuditType.COLLECTION, action, doc, data, user)


def audit_collection_delete(
    *,
    slug: str,
    fields: Sequence[SchemaField],
    doc: Mapping[str, Any],
    user: AuditUser | None = None,
    settings: DiffSettings | None = None,
) -> AuditLogEntry:
    """Build the audit entry for a deleted collection document."""
    diff = compute_audit_diff(doc, None, fields, settings=settings)
    return _build_entry(
        slug, AuditType.COLLECTION, AuditActionType.DELETE, doc, {"before": diff.before}, user
    )


def audit_global_change(
    *,
    slug: str,
    fields: Sequence[SchemaField],
    doc: Mapping[str, Any],
    previous_doc: Mapping[str, Any] | None,
    user: AuditUser | None = None,
    settings: DiffSettings | None = None,
) -> AuditLogEntry:
    """Build the audit entry for an updated global document."""
    diff = compute_audit_diff(previous_doc, doc, fields, settings=settings)
    return _build_entry(
        slug,
        AuditType.GLOBAL,
        AuditActionType.UPDATE,
        doc,
        {"before": diff.before, "after": diff.after},
        user,
    )


def _build_entry(
    slug: str,
    audit_type: AuditType,
    action: AuditActionType,
    doc: Mapping[str, Any] | None,
    data: dict[str, Any],
    user: AuditUser | None,
) -> AuditLogEntry:
    return AuditLogEntry(
        slug=slug,
        type=audit_type,
        action=action,
        doc_id=_document_id(doc),
        user_id=user.id if user is not None else DEFAULT_ID,
        context={"data": data, "user": user.to_dict() if user is not None else None},
    )


def _document_id(doc: Mapping[str, Any] | None) -> str:
    if not doc:
        return DEFAULT_ID
    doc_id = doc.get("id")
    if doc_id is None or doc_id == "":
        return DEFAULT_ID
    return str(doc_id)
