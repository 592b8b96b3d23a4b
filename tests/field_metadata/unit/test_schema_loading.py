"""Schema loading tests."""

from __future__ import annotations

import pytest
from audit_diff.field_metadata import (
    AuditPolicy,
    FieldKind,
    SchemaError,
    extract_field_metadata,
    load_schema_fields,
    parse_schema_text,
)


def test_maps_host_field_types_to_kinds() -> None:
    fields = load_schema_fields(
        [
            {"name": "title", "type": "text"},
            {"name": "author", "type": "relationship", "relationTo": "users"},
            {"name": "cover", "type": "upload", "relationTo": "media"},
            {"name": "meta", "type": "group", "fields": [{"name": "a", "type": "text"}]},
            {"type": "collapsible", "fields": [{"name": "b", "type": "number"}]},
            {"type": "row", "fields": []},
            {"name": "items", "type": "array", "fields": [{"name": "c", "type": "text"}]},
        ]
    )

    assert [(field.name, field.kind) for field in fields] == [
        ("title", FieldKind.PRIMITIVE),
        ("author", FieldKind.RELATIONSHIP),
        ("cover", FieldKind.RELATIONSHIP),
        ("meta", FieldKind.GROUP),
        (None, FieldKind.LAYOUT),
        (None, FieldKind.LAYOUT),
        ("items", FieldKind.PRIMITIVE),
    ]
    assert fields[3].fields[0].name == "a"
    assert fields[4].fields[0].name == "b"
    assert fields[6].fields == ()


def test_reads_policy_annotation_from_custom_namespace() -> None:
    fields = load_schema_fields(
        [
            {
                "name": "secret",
                "type": "text",
                "custom": {"flexiweb": {"audit": {"isRedacted": True, "path": "secret"}}},
            },
            {"name": "note", "type": "text", "custom": {"flexiweb": {"audit": {"ignore": True}}}},
            {"name": "plain", "type": "text", "custom": {"other": {"isRedacted": True}}},
        ]
    )

    assert fields[0].policy == AuditPolicy(is_redacted=True, ignore=False, path="secret")
    assert fields[1].policy == AuditPolicy(is_redacted=False, ignore=True, path=None)
    assert fields[2].policy is None


def test_custom_namespace_can_be_changed() -> None:
    fields = load_schema_fields(
        [{"name": "pin", "type": "text", "custom": {"audit": {"isRedacted": True}}}],
        namespace=("audit",),
    )

    assert fields[0].policy == AuditPolicy(is_redacted=True)


def test_named_tabs_become_groups_and_unnamed_tabs_stay_flat() -> None:
    fields = load_schema_fields(
        [
            {
                "type": "tabs",
                "tabs": [
                    {"name": "seo", "fields": [{"name": "description", "type": "text"}]},
                    {
                        "label": "Security",
                        "fields": [
                            {
                                "name": "recoveryCode",
                                "type": "text",
                                "custom": {"flexiweb": {"audit": {"isRedacted": True}}},
                            }
                        ],
                    },
                ],
            }
        ]
    )

    assert fields[0].kind is FieldKind.LAYOUT
    assert fields[0].fields[0].kind is FieldKind.GROUP
    assert fields[0].fields[1].kind is FieldKind.LAYOUT
    index = extract_field_metadata(fields)
    assert index.redact == frozenset({"recoveryCode"})


def test_tolerates_nodes_without_type_or_mapping_shape() -> None:
    fields = load_schema_fields(
        [
            {"name": "untyped"},
            "not-a-field",
            {"name": "kept", "type": "somethingNew"},
        ]
    )

    assert [(field.name, field.kind) for field in fields] == [("kept", FieldKind.PRIMITIVE)]


def test_unnamed_group_is_treated_as_layout() -> None:
    fields = load_schema_fields(
        [{"type": "group", "fields": [{"name": "x", "type": "relationship"}]}]
    )

    assert fields[0].kind is FieldKind.LAYOUT
    assert extract_field_metadata(fields).relationship == frozenset({"x"})


@pytest.mark.parametrize(
    "path_value",
    ["", "group..field", ".leading", "trailing.", "has space", 42],
)
def test_rejects_malformed_policy_path(path_value: object) -> None:
    raw = [
        {
            "name": "field",
            "type": "text",
            "custom": {"flexiweb": {"audit": {"isRedacted": True, "path": path_value}}},
        }
    ]

    with pytest.raises(SchemaError, match="dotted field path"):
        load_schema_fields(raw)


def test_rejects_non_boolean_policy_flags() -> None:
    raw = [{"name": "f", "type": "text", "custom": {"flexiweb": {"audit": {"ignore": "yes"}}}}]

    with pytest.raises(SchemaError, match="ignore must be a boolean"):
        load_schema_fields(raw)


def test_rejects_non_mapping_policy_annotation() -> None:
    raw = [{"name": "f", "type": "text", "custom": {"flexiweb": {"audit": True}}}]

    with pytest.raises(SchemaError, match="must be a mapping"):
        load_schema_fields(raw)


def test_rejects_non_list_children() -> None:
    with pytest.raises(SchemaError, match=r"fields\[0\]\.fields must be a list"):
        load_schema_fields([{"name": "g", "type": "group", "fields": {"a": 1}}])


def test_rejects_non_list_root() -> None:
    with pytest.raises(SchemaError):
        load_schema_fields({"name": "title", "type": "text"})


def test_parse_schema_text_accepts_yaml_list_and_fields_wrapper() -> None:
    yaml_list = parse_schema_text("- name: title\n  type: text\n")
    json_wrapper = parse_schema_text('{"fields": [{"name": "title", "type": "text"}]}')

    assert yaml_list == [{"name": "title", "type": "text"}]
    assert json_wrapper == yaml_list


def test_parse_schema_text_rejects_non_list() -> None:
    with pytest.raises(SchemaError, match="list of fields"):
        parse_schema_text("title: text\n")
