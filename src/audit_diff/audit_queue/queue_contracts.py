"""Audit queue contracts."""

from __future__ import annotations

from typing import Protocol

from audit_diff.audit_logging.audit_records import AuditLogEntry


class AuditQueueError(Exception):
    """Raised when an audit entry cannot be enqueued."""


class AuditLogQueue(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol implemented by every audit entry sink."""

    def enqueue(self, entry: AuditLogEntry) -> None: ...


class InMemoryAuditQueue:
    """Queue keeping entries in process memory, in enqueue order."""

    def __init__(self) -> None:
        self._entries: list[AuditLogEntry] = []

    @property
    def entries(self) -> tuple[AuditLogEntry, ...]:
        return tuple(self._entries)

    def enqueue(self, entry: AuditLogEntry) -> None:
        self._entries.append(entry)

    def drain(self) -> list[AuditLogEntry]:
        """Return all queued entries and clear the queue."""
        drained, self._entries = self._entries, []
        return drained
