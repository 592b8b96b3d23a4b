"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from audit_diff.diff_engine.diff_settings import DiffSettings
from audit_diff.diff_engine.policy_constants import REDACTED
from audit_diff.field_metadata.metadata_extraction import DEFAULT_MAX_DEPTH
from audit_diff.field_metadata.schema_loading import (
    DEFAULT_POLICY_NAMESPACE,
    SchemaError,
    load_schema_fields,
    parse_schema_text,
)

from .runtime_settings import (
    DEFAULT_USERNAME_FIELD,
    AuditSettings,
    Configuration,
    KafkaSettings,
    SchemaConfig,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    schema = _parse_schema_section(parsed.get("schema"), path.parent)
    diff = _parse_diff_section(parsed.get("diff"))
    audit = _parse_audit_section(parsed.get("audit"))
    kafka = _parse_kafka_section(parsed.get("kafka"))

    return Configuration(path=path, schema=schema, diff=diff, audit=audit, kafka=kafka)


def _parse_schema_section(value: Any, base_path: Path) -> SchemaConfig:
    section = _require_mapping(value, "schema")
    namespace = _parse_namespace(section.get("policy_namespace"))
    text, source_path = _load_schema_definition(section, base_path)
    if not text.strip():
        raise ConfigurationError("Schema text cannot be empty.")

    try:
        fields = load_schema_fields(parse_schema_text(text), namespace=namespace)
    except SchemaError as exc:
        raise ConfigurationError(str(exc)) from exc

    return SchemaConfig(fields=fields, namespace=namespace, source_path=source_path)


def _load_schema_definition(
    section: Mapping[str, Any], base_path: Path
) -> tuple[str, Path | None]:
    inline = section.get("inline")
    path_value = section.get("path")
    if inline and path_value:
        raise ConfigurationError("Schema definition must not set both inline and path.")
    if inline:
        if not isinstance(inline, str):
            raise ConfigurationError("Schema inline value must be a string.")
        return inline, None
    if path_value:
        if not isinstance(path_value, str):
            raise ConfigurationError("Schema path must be a string.")
        schema_path = _resolve_path(base_path, path_value)
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")
        text = schema_path.read_text(encoding="utf-8")
        return text, schema_path
    raise ConfigurationError("Schema definition requires either inline or path.")


def _parse_namespace(value: Any) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_POLICY_NAMESPACE
    if isinstance(value, str):
        parts = tuple(part.strip() for part in value.split(".") if part.strip())
    elif isinstance(value, Sequence):
        parts = tuple(
            _require_non_empty_string(item, "schema.policy_namespace entries") for item in value
        )
    else:
        raise ConfigurationError("schema.policy_namespace must be a string or list of strings.")
    if not parts:
        raise ConfigurationError("schema.policy_namespace must not be empty.")
    return parts


def _parse_diff_section(value: Any) -> DiffSettings:
    if value is None:
        return DiffSettings()
    section = _require_mapping(value, "diff")
    redaction_marker = _require_non_empty_string(
        section.get("redaction_marker", REDACTED), "diff.redaction_marker"
    )
    max_depth = _require_positive_int(
        section.get("max_depth", DEFAULT_MAX_DEPTH), "diff.max_depth"
    )
    extra_redact_keys = _normalize_string_sequence(
        section.get("extra_redact_keys"), "diff.extra_redact_keys"
    )
    extra_ignore_keys = _normalize_string_sequence(
        section.get("extra_ignore_keys"), "diff.extra_ignore_keys"
    )
    return DiffSettings(
        redaction_marker=redaction_marker,
        max_depth=max_depth,
        extra_redact_keys=frozenset(extra_redact_keys),
        extra_ignore_keys=frozenset(extra_ignore_keys),
    )


def _parse_audit_section(value: Any) -> AuditSettings:
    if value is None:
        return AuditSettings()
    section = _require_mapping(value, "audit")
    username_field = _require_non_empty_string(
        section.get("username_field", DEFAULT_USERNAME_FIELD), "audit.username_field"
    )
    return AuditSettings(username_field=username_field)


def _parse_kafka_section(value: Any) -> KafkaSettings | None:
    if value is None:
        return None
    section = _require_mapping(value, "kafka")
    bootstrap_servers = _normalize_bootstrap_servers(section.get("bootstrap_servers"))
    topic = _require_non_empty_string(section.get("topic"), "kafka.topic")
    security = section.get("security") or {}
    if not isinstance(security, Mapping):
        raise ConfigurationError("kafka.security must be a mapping.")
    flush_timeout_seconds = _require_positive_int(
        section.get("flush_timeout_seconds", 10), "kafka.flush_timeout_seconds"
    )
    retries = _require_non_negative_int(section.get("retries", 2), "kafka.retries")
    return KafkaSettings(
        bootstrap_servers=bootstrap_servers,
        topic=topic,
        security=dict(security),
        flush_timeout_seconds=flush_timeout_seconds,
        retries=retries,
    )


def _normalize_bootstrap_servers(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("kafka.bootstrap_servers is required.")
    servers: list[str] = []
    if isinstance(value, str):
        servers = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("kafka.bootstrap_servers entries must be strings.")
            stripped = item.strip()
            if stripped:
                servers.append(stripped)
    else:
        raise ConfigurationError("kafka.bootstrap_servers must be a string or list of strings.")
    if not servers:
        raise ConfigurationError("kafka.bootstrap_servers must contain at least one server.")
    return tuple(servers)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value


def _require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return value
