"""Policy index extraction from schema fields."""

from __future__ import annotations

from collections.abc import Sequence

from .policy_models import FieldKind, PolicyIndex, SchemaField

DEFAULT_MAX_DEPTH = 64


class AuditDiffError(Exception):
    """Base class for audit diff computation failures."""


class SchemaTooDeepError(AuditDiffError):
    """Raised when schema nesting exceeds the configured maximum depth."""


def extract_field_metadata(
    fields: Sequence[SchemaField], *, max_depth: int = DEFAULT_MAX_DEPTH
) -> PolicyIndex:
    """Walk schema fields depth-first and collect redact, ignore and relationship paths.

    Layout fields contribute no path segment, but their children are still indexed at
    the enclosing prefix.
    """
    redact: set[str] = set()
    ignore: set[str] = set()
    relationship: set[str] = set()
    _collect(
        fields,
        prefix="",
        depth=0,
        max_depth=max_depth,
        redact=redact,
        ignore=ignore,
        relationship=relationship,
    )
    return PolicyIndex(
        redact=frozenset(redact),
        ignore=frozenset(ignore),
        relationship=frozenset(relationship),
    )


def _collect(
    fields: Sequence[SchemaField],
    *,
    prefix: str,
    depth: int,
    max_depth: int,
    redact: set[str],
    ignore: set[str],
    relationship: set[str],
) -> None:
    if depth > max_depth:
        raise SchemaTooDeepError(
            f"Schema nesting exceeds maximum depth of {max_depth} at '{prefix or '<root>'}'."
        )
    for schema_field in fields:
        if schema_field.name is None:
            if schema_field.kind in (FieldKind.LAYOUT, FieldKind.GROUP):
                _collect(
                    schema_field.fields,
                    prefix=prefix,
                    depth=depth + 1,
                    max_depth=max_depth,
                    redact=redact,
                    ignore=ignore,
                    relationship=relationship,
                )
            continue

        path = f"{prefix}.{schema_field.name}" if prefix else schema_field.name
        policy = schema_field.policy
        policy_path = policy.path if policy is not None and policy.path else path
        if policy is not None and policy.is_redacted:
            redact.add(policy_path)
        if policy is not None and policy.ignore:
            ignore.add(policy_path)
        if schema_field.kind is FieldKind.RELATIONSHIP:
            relationship.add(policy_path)
        if schema_field.kind is FieldKind.GROUP:
            _collect(
                schema_field.fields,
                prefix=path,
                depth=depth + 1,
                max_depth=max_depth,
                redact=redact,
                ignore=ignore,
                relationship=relationship,
            )
