"""Audit logging domain exports."""

from .audit_records import DEFAULT_ID, AuditActionType, AuditLogEntry, AuditType, AuditUser
from .audit_stamping import AUDIT_GROUP_NAME, stamp_audit_fields
from .change_hooks import audit_collection_change, audit_collection_delete, audit_global_change

__all__ = [
    "AUDIT_GROUP_NAME",
    "DEFAULT_ID",
    "AuditActionType",
    "AuditLogEntry",
    "AuditType",
    "AuditUser",
    "audit_collection_change",
    "audit_collection_delete",
    "audit_global_change",
    "stamp_audit_fields",
]
