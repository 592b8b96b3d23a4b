"""Field metadata entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FieldKind(str, Enum):
    """How a schema field takes part in audit diffing."""

    PRIMITIVE = "primitive"
    RELATIONSHIP = "relationship"
    GROUP = "group"
    LAYOUT = "layout"


@dataclass(frozen=True)
class AuditPolicy:
    """Audit annotation attached to one schema field."""

    is_redacted: bool = False
    ignore: bool = False
    path: str | None = None


@dataclass(frozen=True)
class SchemaField:
    """One node of a host schema definition.

    Layout fields carry no name; their children live at the parent's level.
    """

    name: str | None
    kind: FieldKind
    fields: tuple[SchemaField, ...] = ()
    policy: AuditPolicy | None = None


@dataclass(frozen=True)
class PolicyIndex:
    """Dotted field paths grouped by the treatment the diff engine applies."""

    redact: frozenset[str] = field(default_factory=frozenset)
    ignore: frozenset[str] = field(default_factory=frozenset)
    relationship: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "redact": sorted(self.redact),
            "ignore": sorted(self.ignore),
            "relationship": sorted(self.relationship),
        }
