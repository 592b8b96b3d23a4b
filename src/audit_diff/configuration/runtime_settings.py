"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from audit_diff.diff_engine.diff_settings import DiffSettings
from audit_diff.field_metadata.policy_models import SchemaField

DEFAULT_USERNAME_FIELD = "email"


@dataclass(frozen=True)
class SchemaConfig:
    """Normalized schema settings."""

    fields: tuple[SchemaField, ...]
    namespace: tuple[str, ...]
    source_path: Path | None


@dataclass(frozen=True)
class AuditSettings:
    """Audit record settings."""

    username_field: str = DEFAULT_USERNAME_FIELD


@dataclass(frozen=True)
class KafkaSettings:
    """Kafka producer configuration for publishing audit entries."""

    bootstrap_servers: tuple[str, ...]
    topic: str
    security: Mapping[str, object]
    flush_timeout_seconds: int
    retries: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaConfig
    diff: DiffSettings
    audit: AuditSettings
    kafka: KafkaSettings | None
