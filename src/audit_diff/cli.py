"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from audit_diff.audit_logging import (
    DEFAULT_ID,
    AuditLogEntry,
    AuditUser,
    audit_collection_change,
    audit_collection_delete,
    audit_global_change,
    stamp_audit_fields,
)
from audit_diff.audit_queue import AuditQueueError, KafkaAuditPublisher
from audit_diff.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from audit_diff.diff_engine import compute_audit_diff
from audit_diff.field_metadata import AuditDiffError, extract_field_metadata


VERBOSE_HANDLER_NAME = "audit_diff.verbose"


class CliError(Exception):
    """Custom CLI error."""


_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON audit-diff configuration file",
)
_BEFORE_OPTION = click.option(
    "--before",
    "before_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON file with the document before the change (omit for a create)",
)
_AFTER_OPTION = click.option(
    "--after",
    "after_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON file with the document after the change (omit for a delete)",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="audit-diff")
@click.option("--verbose", is_flag=True, default=False, help="Log diagnostics to stderr.")
def cli(verbose: bool) -> None:
    """Schema-driven audit diff utility."""
    if verbose:
        package_logger = logging.getLogger("audit_diff")
        if not any(h.get_name() == VERBOSE_HANDLER_NAME for h in package_logger.handlers):
            handler = logging.StreamHandler()
            handler.set_name(VERBOSE_HANDLER_NAME)
            handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
            package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="extract-metadata")
@_CONFIG_OPTION
def extract_metadata(config_path: str) -> None:
    """Print the redact, ignore and relationship paths declared by the schema."""
    configuration = _load(config_path)
    try:
        policy_index = extract_field_metadata(
            configuration.schema.fields, max_depth=configuration.diff.max_depth
        )
    except AuditDiffError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(policy_index.to_dict(), indent=2))


@cli.command(name="diff")
@_CONFIG_OPTION
@_BEFORE_OPTION
@_AFTER_OPTION
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional file for the diff JSON instead of standard output",
)
def diff_command(
    config_path: str, before_path: str | None, after_path: str | None, output_path: str | None
) -> None:
    """Compute the policy-filtered before/after diff of two document snapshots."""
    configuration = _load(config_path)
    before, after = _read_snapshots(before_path, after_path)
    try:
        diff = compute_audit_diff(
            before, after, configuration.schema.fields, settings=configuration.diff
        )
    except AuditDiffError as exc:
        raise CliError(str(exc)) from exc

    rendered = json.dumps(diff.to_dict(), indent=2, default=str)
    if output_path:
        try:
            Path(output_path).write_text(rendered + "\n", encoding="utf-8")
        except OSError as exc:
            raise CliError(str(exc)) from exc
        click.echo(str(Path(output_path).resolve()))
        return
    click.echo(rendered)


@cli.command(name="log")
@_CONFIG_OPTION
@click.option("--slug", required=True, help="Collection or global slug")
@click.option(
    "--type",
    "audit_type",
    type=click.Choice(["collection", "global"]),
    default="collection",
    show_default=True,
    help="Kind of document that changed",
)
@click.option(
    "--action",
    type=click.Choice(["create", "update", "delete"]),
    required=True,
    help="Change operation to record",
)
@_BEFORE_OPTION
@_AFTER_OPTION
@click.option(
    "--doc-id",
    "doc_id",
    required=False,
    help="Document id to record when the snapshots carry none",
)
@click.option(
    "--user",
    "user_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON file with the user who made the change",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the audit entry instead of publishing it to Kafka.",
)
def log_command(  # pylint: disable=too-many-arguments
    config_path: str,
    slug: str,
    audit_type: str,
    action: str,
    before_path: str | None,
    after_path: str | None,
    doc_id: str | None,
    user_path: str | None,
    dry_run: bool,
) -> None:
    """Build the audit entry for one change and publish it."""
    configuration = _load(config_path)
    before, after = _read_snapshots(before_path, after_path)
    user = AuditUser.from_request_user(_read_json_document(user_path, "user"))
    try:
        entry = _build_entry(configuration, slug, audit_type, action, before, after, user)
    except AuditDiffError as exc:
        raise CliError(str(exc)) from exc
    if doc_id and entry.doc_id == DEFAULT_ID:
        entry = replace(entry, doc_id=doc_id)

    if dry_run:
        click.echo(json.dumps(entry.to_payload(), indent=2, default=str))
        return
    if configuration.kafka is None:
        raise CliError("Publishing requires a kafka section in the configuration.")
    try:
        KafkaAuditPublisher(configuration.kafka).enqueue(entry)
    except AuditQueueError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"published {entry.action.value} entry for {entry.slug}/{entry.doc_id}")


@cli.command(name="stamp")
@_CONFIG_OPTION
@click.option(
    "--data",
    "data_path",
    required=True,
    type=click.Path(path_type=str),
    help="JSON file with the document about to be saved",
)
@click.option(
    "--operation",
    type=click.Choice(["create", "update"]),
    required=False,
    help="Save operation; omitted for globals, which always count as updates",
)
@click.option(
    "--original",
    "original_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON file with the stored document before this save",
)
@click.option(
    "--user",
    "user_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON file with the user saving the document",
)
def stamp_command(
    config_path: str,
    data_path: str,
    operation: str | None,
    original_path: str | None,
    user_path: str | None,
) -> None:
    """Print the document with its audit group filled for this save."""
    configuration = _load(config_path)
    data = _read_json_document(data_path, "data") or {}
    stamped = stamp_audit_fields(
        data,
        user=_read_json_document(user_path, "user"),
        operation=operation,
        original_doc=_read_json_document(original_path, "original"),
        username_field=configuration.audit.username_field,
    )
    click.echo(json.dumps(stamped, indent=2, default=str))


def _build_entry(  # pylint: disable=too-many-arguments
    configuration: Configuration,
    slug: str,
    audit_type: str,
    action: str,
    before: Mapping[str, Any] | None,
    after: Mapping[str, Any] | None,
    user: AuditUser | None,
) -> AuditLogEntry:
    fields = configuration.schema.fields
    settings = configuration.diff
    if audit_type == "global":
        if action != "update" or after is None:
            raise CliError("Global changes are recorded as updates and require --after.")
        return audit_global_change(
            slug=slug, fields=fields, doc=after, previous_doc=before, user=user, settings=settings
        )
    if action == "delete":
        if before is None:
            raise CliError("A delete requires --before.")
        return audit_collection_delete(
            slug=slug, fields=fields, doc=before, user=user, settings=settings
        )
    if after is None:
        raise CliError(f"A {action} requires --after.")
    return audit_collection_change(
        slug=slug,
        fields=fields,
        doc=after,
        previous_doc=before,
        operation=action,
        user=user,
        settings=settings,
    )


def _load(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _read_snapshots(
    before_path: str | None, after_path: str | None
) -> tuple[Mapping[str, Any] | None, Mapping[str, Any] | None]:
    if before_path is None and after_path is None:
        raise CliError("At least one of --before or --after is required.")
    return (
        _read_json_document(before_path, "before"),
        _read_json_document(after_path, "after"),
    )


def _read_json_document(path: str | None, label: str) -> Mapping[str, Any] | None:
    if path is None:
        return None
    try:
        parsed = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise CliError(f"Cannot read {label} document: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CliError(f"Invalid JSON in {label} document: {exc}") from exc
    if parsed is None:
        return None
    if not isinstance(parsed, Mapping):
        raise CliError(f"The {label} document must be a JSON object.")
    return parsed


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
