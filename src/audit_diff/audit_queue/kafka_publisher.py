"""Kafka producer wrapper publishing audit entries."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from confluent_kafka import KafkaException, Producer

from audit_diff.audit_logging.audit_records import AuditLogEntry
from audit_diff.configuration.runtime_settings import KafkaSettings

from .queue_contracts import AuditQueueError

_LOGGER = logging.getLogger(__name__)

_KAFKA_CLIENT_LOGGER = logging.getLogger("audit_diff.kafka.client")
_KAFKA_CLIENT_LOGGER.addHandler(logging.NullHandler())
_KAFKA_CLIENT_LOGGER.propagate = False
_KAFKA_CLIENT_LOGGER.setLevel(logging.CRITICAL + 1)


class KafkaProducerProtocol(Protocol):
    """Protocol implemented by both real and fake producers."""

    def produce(
        self,
        topic: str,
        value: bytes | None = None,
        key: bytes | None = None,
        on_delivery: Any = None,
    ) -> None: ...

    def flush(self, timeout: float) -> int: ...


class KafkaAuditPublisher:
    """Audit queue publishing JSON-encoded entries to a Kafka topic, keyed by document id."""

    def __init__(
        self,
        kafka_settings: KafkaSettings,
        producer: KafkaProducerProtocol | None = None,
    ) -> None:
        self._settings = kafka_settings
        self._producer = producer or self._create_producer()

    def enqueue(self, entry: AuditLogEntry) -> None:
        """Publish one entry, retrying failed deliveries up to the configured number of times.

        A flush timeout leaves the message queued in the producer and is not retried.
        """
        payload = json.dumps(entry.to_payload(), default=str).encode("utf-8")
        key = entry.doc_id.encode("utf-8")
        attempts = self._settings.retries + 1
        last_error: str | None = None
        for attempt in range(1, attempts + 1):
            last_error = self._publish_once(key, payload)
            if last_error is None:
                _LOGGER.info(
                    "Enqueued audit entry %s/%s (%s) on topic %s",
                    entry.slug,
                    entry.doc_id,
                    entry.action.value,
                    self._settings.topic,
                )
                return
            _LOGGER.warning(
                "Publishing audit entry failed (attempt %d/%d): %s", attempt, attempts, last_error
            )
        raise AuditQueueError(
            f"Failed to publish audit entry for {entry.slug}/{entry.doc_id} "
            f"after {attempts} attempts: {last_error}"
        )

    def _publish_once(self, key: bytes, payload: bytes) -> str | None:
        delivery_errors: list[str] = []

        def _on_delivery(error: Any, _message: Any) -> None:
            if error is not None:
                delivery_errors.append(str(error))

        try:
            self._producer.produce(
                self._settings.topic, value=payload, key=key, on_delivery=_on_delivery
            )
            remaining = self._producer.flush(self._settings.flush_timeout_seconds)
        except (KafkaException, BufferError) as exc:
            return str(exc)
        if remaining > 0:
            # a still-pending message is never produced a second time
            raise AuditQueueError(
                f"Audit entry still pending after {self._settings.flush_timeout_seconds}s "
                f"flush timeout ({remaining} message(s) queued); not retrying."
            )
        if delivery_errors:
            return delivery_errors[0]
        return None

    def _create_producer(self) -> KafkaProducerProtocol:
        config: dict[str, Any] = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "client.id": "audit-diff",
        }
        config.update(self._settings.security)
        try:
            return Producer(config, logger=_KAFKA_CLIENT_LOGGER)
        except TypeError:
            # Older/mock Producer implementations may not support the logger kwarg.
            return Producer(config)
