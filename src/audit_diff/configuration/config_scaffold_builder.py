"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "audit-diff.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for audit-diff.
# Replace every <REQUIRED> placeholder before running extract-metadata, diff or log.
# Replace <OPTIONAL> placeholders only when your setup needs them.

schema:
  # Provide either inline field-config YAML/JSON text or a path to a field-config file.
  path: "<REQUIRED>"
  # inline: "<OPTIONAL>"
  # Keys under each field's `custom` bag that hold the audit policy annotation.
  policy_namespace:
    - "flexiweb"
    - "audit"

diff:
  redaction_marker: "<OPTIONAL>"
  max_depth: "<OPTIONAL>"
  # Key names redacted or ignored at any depth, on top of the built-in lists.
  extra_redact_keys:
    - "<OPTIONAL>"
  extra_ignore_keys:
    - "<OPTIONAL>"

audit:
  username_field: "<OPTIONAL>"

# Only required when publishing audit entries with `log` outside of --dry-run.
kafka:
  bootstrap_servers:
    - "<OPTIONAL>"
  topic: "<OPTIONAL>"
  security:
    sasl.username: "<OPTIONAL>"
    sasl.password: "<OPTIONAL>"
    security.protocol: "<OPTIONAL>"
    sasl.mechanisms: "<OPTIONAL>"
  flush_timeout_seconds: "<OPTIONAL>"
  retries: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
