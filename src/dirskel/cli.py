"""Command line interface for the dirskel project."""

from __future__ import annotations

import difflib
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax

from dirskel.config import ConfigError, ConfigManager, DirskelConfig, resolve_with_precedence
from dirskel.config.resolver import assign_dotted
from dirskel.errors import (
    DestinationCreateError,
    EntryAccessError,
    PathNotFoundError,
)
from dirskel.replication import ReplicationSummary, SkeletonCloner, format_snapshot
from dirskel.replication.progress import ProgressSnapshot

console = Console()
error_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route package logging through rich on stderr at the configured level."""
    logger = logging.getLogger("dirskel")
    for existing in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(existing)
    handler = RichHandler(console=error_console, show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    if summary_only and mode not in {"summary", "warning", "error"}:
        return

    console.print(message, soft_wrap=True)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Target root path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def _summary_payload(summary: ReplicationSummary) -> dict[str, Any]:
    payload = summary.model_dump(mode="json")
    payload["counts"] = {
        "folders": summary.directories.total,
        "files": summary.files.total,
        "failures": len(summary.failures),
    }
    return payload


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="dirskel")
def cli() -> None:
    """dirskel mirrors a directory tree as empty folders and zero-byte files."""


@cli.command()
@click.argument("source", type=click.Path(path_type=str))
@click.argument("destination", type=click.Path(path_type=str))
@click.option(
    "--on-error",
    type=click.Choice(["abort", "skip"]),
    help="Abort on the first entry failure or skip it and continue.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit a JSON summary of the run.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def clone(
    ctx: click.Context,
    source: str,
    destination: str,
    on_error: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Replicate the folder structure of SOURCE into DESTINATION.

    Hidden and system entries are skipped. Files are created as zero-byte
    placeholders; existing destination files are truncated.

    Args:
        ctx: Click context used for parameter source inspection.
        source: Root directory whose structure is cloned.
        destination: Root directory receiving the skeleton.
        on_error: Optional override for the entry error policy.
        json_output: If True, emit the run summary as JSON.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.

    Raises:
        click.ClickException: If configuration or replication fails.
    """

    try:
        overrides = {"replication.on_error": on_error} if on_error else None
        config = ConfigManager().load(cli_overrides=overrides, ensure_file=False)
        _configure_logging(config.logging.level)

        explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
        explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

        quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
        summary_only = summary_mode if explicit_summary else config.cli.summary_default

        if json_output:
            if explicit_quiet and quiet_enabled:
                raise click.ClickException("--json cannot be combined with --quiet.")
            if explicit_summary and summary_only:
                raise click.ClickException("--json cannot be combined with --summary.")
            quiet_enabled = True
            summary_only = False

        if quiet_enabled and summary_only:
            raise click.ClickException(
                "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
            )

        def _on_progress(snapshot: ProgressSnapshot) -> None:
            _emit_message(
                f"[cyan]{format_snapshot(snapshot)}[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )

        _emit_message(
            f"Cloning structure\n  source:      {escape(source)}\n"
            f"  destination: {escape(destination)}",
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )

        summary = SkeletonCloner(config, observer=_on_progress).run(source, destination)

        if json_output:
            console.print_json(data=_summary_payload(summary))
            return

        for failure in summary.failures:
            _emit_message(
                f"[yellow]Skipped {escape(str(failure.path))} "
                f"({failure.operation}): {escape(failure.message)}[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        metrics = {
            "folders": summary.directories.total,
            "files": summary.files.total,
            "failures": len(summary.failures),
        }
        _emit_message(
            _format_summary_line("Clone", summary.destination, metrics),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        _emit_message(
            f"  source:      {escape(str(summary.source))}\n"
            f"  destination: {escape(str(summary.destination))}",
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except PathNotFoundError as exc:
        _handle_cli_error(
            str(exc),
            code="path_not_found",
            json_output=json_output,
            details={"path": str(exc.path)},
            original=exc,
        )
    except DestinationCreateError as exc:
        _handle_cli_error(
            str(exc),
            code="destination_error",
            json_output=json_output,
            details={"path": str(exc.path)},
            original=exc,
        )
    except EntryAccessError as exc:
        _handle_cli_error(
            str(exc),
            code="entry_access_error",
            json_output=json_output,
            details={"path": str(exc.path), "operation": exc.operation},
            original=exc,
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_output, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while cloning {source}: {exc}",
            code="internal_error",
            json_output=json_output,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.group()
def config() -> None:
    """Manage dirskel configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    try:
        config = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text()
        current = manager.load_file_overrides()
        updated = deepcopy(current)
        assign_dotted(updated, key, parsed_value)
        resolve_with_precedence(defaults=DirskelConfig(), file_overrides=updated)
        if updated == current:
            console.print("[yellow]No changes applied; value already up to date.[/yellow]")
            return
        manager.save(updated)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    diff = difflib.unified_diff(
        before.splitlines(),
        manager.read_text().splitlines(),
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
