"""Audit queue exports."""

from .kafka_publisher import KafkaAuditPublisher
from .queue_contracts import AuditLogQueue, AuditQueueError, InMemoryAuditQueue

__all__ = [
    "AuditLogQueue",
    "AuditQueueError",
    "InMemoryAuditQueue",
    "KafkaAuditPublisher",
]
