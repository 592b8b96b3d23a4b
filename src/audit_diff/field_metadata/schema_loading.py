"""Schema loading service for host field configurations."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

import yaml

from .policy_models import AuditPolicy, FieldKind, SchemaField

DEFAULT_POLICY_NAMESPACE: tuple[str, ...] = ("flexiweb", "audit")

_LOGGER = logging.getLogger(__name__)

_DOTTED_PATH_PATTERN = re.compile(r"^[^.\s]+(?:\.[^.\s]+)*$")
_RELATIONSHIP_TYPES = frozenset({"relationship", "upload"})
_LAYOUT_TYPES = frozenset({"collapsible", "row", "ui"})


class SchemaError(Exception):
    """Raised for schema parsing or policy annotation failures."""


def parse_schema_text(text: str) -> list[Any]:
    """Parse YAML or JSON schema text into a raw field list."""
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid schema definition: {exc}") from exc

    if isinstance(parsed, Mapping) and "fields" in parsed:
        parsed = parsed["fields"]
    if not isinstance(parsed, list):
        raise SchemaError("Schema definition must be a list of fields.")
    return parsed


def load_schema_fields(
    raw_fields: Any, *, namespace: Sequence[str] = DEFAULT_POLICY_NAMESPACE
) -> tuple[SchemaField, ...]:
    """Convert host field-config mappings into validated schema fields."""
    if isinstance(raw_fields, (str, bytes)) or not isinstance(raw_fields, Sequence):
        raise SchemaError("Schema fields must be a list.")
    return _load_field_list(raw_fields, namespace=tuple(namespace), location="fields")


def _load_field_list(
    raw_fields: Sequence[Any], *, namespace: tuple[str, ...], location: str
) -> tuple[SchemaField, ...]:
    loaded: list[SchemaField] = []
    for index, raw_field in enumerate(raw_fields):
        field_location = f"{location}[{index}]"
        schema_field = _load_field(raw_field, namespace=namespace, location=field_location)
        if schema_field is not None:
            loaded.append(schema_field)
    return tuple(loaded)


def _load_field(
    raw_field: Any, *, namespace: tuple[str, ...], location: str
) -> SchemaField | None:
    if not isinstance(raw_field, Mapping):
        _LOGGER.debug("Skipping non-mapping schema node at %s", location)
        return None
    field_type = raw_field.get("type")
    if not isinstance(field_type, str) or not field_type:
        _LOGGER.debug("Skipping schema node without a type at %s", location)
        return None

    name = raw_field.get("name")
    if not isinstance(name, str) or not name:
        name = None
    policy = _load_policy(raw_field.get("custom"), namespace=namespace, location=location)

    if field_type == "tabs":
        return SchemaField(
            name=None,
            kind=FieldKind.LAYOUT,
            fields=_load_tabs(raw_field.get("tabs"), namespace=namespace, location=location),
            policy=policy,
        )
    if field_type == "group" and name is not None:
        kind = FieldKind.GROUP
    elif field_type == "group" or field_type in _LAYOUT_TYPES:
        kind = FieldKind.LAYOUT
    elif field_type in _RELATIONSHIP_TYPES:
        kind = FieldKind.RELATIONSHIP
    else:
        return SchemaField(name=name, kind=FieldKind.PRIMITIVE, policy=policy)

    children: tuple[SchemaField, ...] = ()
    if kind is not FieldKind.RELATIONSHIP:
        children = _load_children(raw_field.get("fields"), namespace=namespace, location=location)
    return SchemaField(name=name, kind=kind, fields=children, policy=policy)


def _load_tabs(
    raw_tabs: Any, *, namespace: tuple[str, ...], location: str
) -> tuple[SchemaField, ...]:
    if raw_tabs is None:
        return ()
    if not isinstance(raw_tabs, list):
        raise SchemaError(f"{location}.tabs must be a list.")
    tabs: list[SchemaField] = []
    for index, raw_tab in enumerate(raw_tabs):
        tab_location = f"{location}.tabs[{index}]"
        if not isinstance(raw_tab, Mapping):
            _LOGGER.debug("Skipping non-mapping tab at %s", tab_location)
            continue
        tab_name = raw_tab.get("name")
        named = isinstance(tab_name, str) and bool(tab_name)
        tabs.append(
            SchemaField(
                name=tab_name if named else None,
                kind=FieldKind.GROUP if named else FieldKind.LAYOUT,
                fields=_load_children(
                    raw_tab.get("fields"), namespace=namespace, location=tab_location
                ),
                policy=_load_policy(
                    raw_tab.get("custom"), namespace=namespace, location=tab_location
                ),
            )
        )
    return tuple(tabs)


def _load_children(
    raw_children: Any, *, namespace: tuple[str, ...], location: str
) -> tuple[SchemaField, ...]:
    if raw_children is None:
        return ()
    if not isinstance(raw_children, list):
        raise SchemaError(f"{location}.fields must be a list.")
    return _load_field_list(raw_children, namespace=namespace, location=f"{location}.fields")


def _load_policy(
    custom: Any, *, namespace: tuple[str, ...], location: str
) -> AuditPolicy | None:
    annotation: Any = custom
    for key in namespace:
        if not isinstance(annotation, Mapping):
            return None
        annotation = annotation.get(key)
    if annotation is None:
        return None
    annotation_location = ".".join((location, "custom", *namespace))
    if not isinstance(annotation, Mapping):
        raise SchemaError(f"{annotation_location} must be a mapping.")

    is_redacted = _optional_bool(
        annotation.get("isRedacted"), f"{annotation_location}.isRedacted"
    )
    ignore = _optional_bool(annotation.get("ignore"), f"{annotation_location}.ignore")
    path = annotation.get("path")
    if path is not None:
        if not isinstance(path, str) or not _DOTTED_PATH_PATTERN.fullmatch(path):
            raise SchemaError(
                f"{annotation_location}.path must be a dotted field path, got {path!r}."
            )
    return AuditPolicy(is_redacted=is_redacted, ignore=ignore, path=path)


def _optional_bool(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SchemaError(f"{field_name} must be a boolean.")
    return value
