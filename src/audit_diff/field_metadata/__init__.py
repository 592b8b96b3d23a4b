"""Field metadata exports."""

from .metadata_extraction import (
    DEFAULT_MAX_DEPTH,
    AuditDiffError,
    SchemaTooDeepError,
    extract_field_metadata,
)
from .policy_models import AuditPolicy, FieldKind, PolicyIndex, SchemaField
from .schema_loading import (
    DEFAULT_POLICY_NAMESPACE,
    SchemaError,
    load_schema_fields,
    parse_schema_text,
)

__all__ = [
    "AuditPolicy",
    "FieldKind",
    "PolicyIndex",
    "SchemaField",
    "AuditDiffError",
    "SchemaTooDeepError",
    "SchemaError",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_POLICY_NAMESPACE",
    "extract_field_metadata",
    "load_schema_fields",
    "parse_schema_text",
]
