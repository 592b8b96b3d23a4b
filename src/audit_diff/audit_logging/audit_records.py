"""Audit log record entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_ID = "-"


class AuditType(str, Enum):
    """Kind of document an audit entry refers to."""

    COLLECTION = "collection"
    GLOBAL = "global"


class AuditActionType(str, Enum):
    """Change operation recorded by an audit entry."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class AuditUser:
    """User snapshot stored alongside an audit entry."""

    id: str
    collection: str = DEFAULT_ID
    email: str | None = None
    is_system: bool = False
    role: str = DEFAULT_ID

    @staticmethod
    def from_request_user(user: Mapping[str, Any] | None) -> AuditUser | None:
        if not user or user.get("id") is None:
            return None
        return AuditUser(
            id=str(user["id"]),
            collection=user.get("collection") or DEFAULT_ID,
            email=user.get("email"),
            is_system=bool(user.get("isSystem", False)),
            role=user.get("role") or DEFAULT_ID,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "collection": self.collection,
            "email": self.email,
            "isSystem": self.is_system,
            "role": self.role,
        }


@dataclass(frozen=True)
class AuditLogEntry:
    """One audit record handed to the audit queue."""

    slug: str
    type: AuditType
    action: AuditActionType
    doc_id: str
    user_id: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Return the persisted record shape."""
        return {
            "slug": self.slug,
            "type": self.type.value,
            "action": self.action.value,
            "docId": self.doc_id,
            "userId": self.user_id,
            "context": dict(self.context),
        }
