"""Diff engine exports."""

from .diff_settings import DiffSettings
from .document_diff import AuditDiff, DocumentTooDeepError, compute_audit_diff, diff_documents
from .policy_constants import GLOBAL_IGNORE_KEYS, GLOBAL_REDACT_KEYS, REDACTED
from .snapshot_values import (
    MISSING,
    ValueKind,
    classify_value,
    normalize_relationship,
    redact_value,
    values_equal,
)

__all__ = [
    "AuditDiff",
    "DiffSettings",
    "DocumentTooDeepError",
    "GLOBAL_IGNORE_KEYS",
    "GLOBAL_REDACT_KEYS",
    "REDACTED",
    "MISSING",
    "ValueKind",
    "classify_value",
    "compute_audit_diff",
    "diff_documents",
    "normalize_relationship",
    "redact_value",
    "values_equal",
]
