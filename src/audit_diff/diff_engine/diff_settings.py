"""Diff engine settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from audit_diff.field_metadata.metadata_extraction import DEFAULT_MAX_DEPTH

from .policy_constants import REDACTED


@dataclass(frozen=True)
class DiffSettings:
    """Redaction and traversal settings applied by the diff engine."""

    redaction_marker: str = REDACTED
    max_depth: int = DEFAULT_MAX_DEPTH
    extra_redact_keys: frozenset[str] = field(default_factory=frozenset)
    extra_ignore_keys: frozenset[str] = field(default_factory=frozenset)
