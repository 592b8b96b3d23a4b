"""Audit diff computation over before/after document snapshots."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from audit_diff.field_metadata.metadata_extraction import AuditDiffError, extract_field_metadata
from audit_diff.field_metadata.policy_models import PolicyIndex, SchemaField

from .diff_settings import DiffSettings
from .policy_constants import GLOBAL_IGNORE_KEYS, GLOBAL_REDACT_KEYS
from .snapshot_values import (
    MISSING,
    ValueKind,
    classify_value,
    normalize_relationship,
    redact_value,
    values_equal,
)

_LOGGER = logging.getLogger(__name__)


class DocumentTooDeepError(AuditDiffError):
    """Raised when snapshot nesting exceeds the configured maximum depth."""


@dataclass(frozen=True)
class AuditDiff:
    """Before and after projections holding only changed, policy-filtered keys."""

    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.before and not self.after

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {"before": self.before, "after": self.after}


def compute_audit_diff(
    before: Mapping[str, Any] | None,
    after: Mapping[str, Any] | None,
    fields: Sequence[SchemaField],
    *,
    settings: DiffSettings | None = None,
) -> AuditDiff:
    """Extract the policy index from schema fields and diff two snapshots with it."""
    resolved_settings = settings or DiffSettings()
    policy_index = extract_field_metadata(fields, max_depth=resolved_settings.max_depth)
    return diff_documents(before, after, policy_index, settings=resolved_settings)


def diff_documents(
    before: Mapping[str, Any] | None,
    after: Mapping[str, Any] | None,
    policy_index: PolicyIndex,
    *,
    settings: DiffSettings | None = None,
) -> AuditDiff:
    """Diff two snapshots; an absent snapshot counts as an empty document."""
    walker = _SnapshotDiffer(policy_index, settings or DiffSettings())
    before_projection, after_projection = walker.diff(
        _root_document(before, "before"), _root_document(after, "after")
    )
    _LOGGER.debug(
        "Computed audit diff: %d before keys, %d after keys",
        len(before_projection),
        len(after_projection),
    )
    return AuditDiff(before=before_projection, after=after_projection)


def _root_document(document: Any, side: str) -> Mapping[str, Any]:
    if document is None:
        return {}
    if not isinstance(document, Mapping):
        raise AuditDiffError(
            f"The {side} snapshot must be a mapping, got {type(document).__name__}."
        )
    return document


class _SnapshotDiffer:
    """Recursive walk over a pair of structures, emitting only changed keys."""

    def __init__(self, policy_index: PolicyIndex, settings: DiffSettings) -> None:
        self._index = policy_index
        self._settings = settings
        self._ignore_keys = GLOBAL_IGNORE_KEYS | settings.extra_ignore_keys
        self._redact_keys = GLOBAL_REDACT_KEYS | settings.extra_redact_keys
        self._active_pairs: set[tuple[int, int]] = set()

    def diff(
        self, before: Mapping[str, Any], after: Mapping[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        return self._diff_structures(before, after, prefix="", depth=0)

    def _diff_structures(
        self,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
        *,
        prefix: str,
        depth: int,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        if depth > self._settings.max_depth:
            raise DocumentTooDeepError(
                f"Document nesting exceeds maximum depth of {self._settings.max_depth} "
                f"at '{prefix}'."
            )
        pair = (id(before), id(after))
        if pair in self._active_pairs:
            return {}, {}
        self._active_pairs.add(pair)
        try:
            return self._diff_keys(before, after, prefix=prefix, depth=depth)
        finally:
            self._active_pairs.discard(pair)

    def _diff_keys(
        self,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
        *,
        prefix: str,
        depth: int,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        before_out: dict[str, Any] = {}
        after_out: dict[str, Any] = {}

        for key in dict.fromkeys([*after, *before]):
            path = f"{prefix}.{key}" if prefix else str(key)
            if key in self._ignore_keys or path in self._index.ignore:
                continue

            before_value = before.get(key, MISSING)
            after_value = after.get(key, MISSING)
            if values_equal(before_value, after_value):
                continue

            if key in self._redact_keys or path in self._index.redact:
                before_out[key] = self._settings.redaction_marker
                after_out[key] = self._settings.redaction_marker
                continue

            if path in self._index.relationship:
                before_ids = normalize_relationship(before_value)
                after_ids = normalize_relationship(after_value)
                if not values_equal(before_ids, after_ids):
                    self._emit(before_out, key, before_ids)
                    self._emit(after_out, key, after_ids)
                continue

            before_kind = classify_value(before_value)
            after_kind = classify_value(after_value)
            if ValueKind.STRUCTURE in (before_kind, after_kind):
                nested_before, nested_after = self._diff_structures(
                    before_value if before_kind is ValueKind.STRUCTURE else {},
                    after_value if after_kind is ValueKind.STRUCTURE else {},
                    prefix=path,
                    depth=depth + 1,
                )
                self._emit_nested(before_out, key, before_kind, before_value, nested_before)
                self._emit_nested(after_out, key, after_kind, after_value, nested_after)
                continue

            self._emit(before_out, key, before_value)
            self._emit(after_out, key, after_value)

        return before_out, after_out

    def _emit(self, projection: dict[str, Any], key: str, value: Any) -> None:
        if value is MISSING:
            return
        # sequences and id-less references are emitted whole
        projection[key] = redact_value(value, self._redact_keys, self._settings.redaction_marker)

    def _emit_nested(
        self,
        projection: dict[str, Any],
        key: str,
        kind: ValueKind,
        raw_value: Any,
        nested: dict[str, Any],
    ) -> None:
        if kind is ValueKind.STRUCTURE:
            if nested:
                projection[key] = nested
            return
        self._emit(projection, key, raw_value)
