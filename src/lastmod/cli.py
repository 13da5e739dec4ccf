"""Command line interface for the lastmod project."""

from __future__ import annotations

import difflib
import logging
import os
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

from lastmod.config import ConfigError, ConfigManager, LastmodConfig, resolve_with_precedence
from lastmod.scan import RootUnreadableError, ScanError, ScanResult, TraversalConfig, find_latest

console = Console()
err_console = Console(stderr=True)


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


def _configure_logging(level: str) -> None:
    """Route log records to stderr through Rich at the requested level."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigError(f"Unknown logging level {level!r}.")
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


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
    return f"[green]{command} summary for {escape(_display_path(root))}: {parts}.[/green]"


def _display_path(path: Path | str) -> str:
    """Return `path` as printable text; undecodable name bytes become `\\xNN` escapes."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def _announce_directory(directory: Path) -> None:
    err_console.print(f"Searching {_display_path(directory)}", markup=False, highlight=False, soft_wrap=True)


def _result_payload(result: ScanResult, time_format: str) -> dict[str, Any]:
    """Build the JSON document describing a scan result."""
    modified_at = result.modified_at
    issues = []
    for issue in result.issues:
        entry = issue.model_dump(mode="json")
        entry["path"] = _display_path(issue.path)
        issues.append(entry)
    return {
        "root": _display_path(result.root),
        "found": result.found,
        "path": _display_path(result.path) if result.path is not None else None,
        "timestamp": result.timestamp,
        "modified_at": modified_at.isoformat() if modified_at else None,
        "formatted": modified_at.strftime(time_format) if modified_at else None,
        "counts": {
            "directories": result.directories_scanned,
            "entries": result.entries_seen,
            "eligible": result.entries_eligible,
            "issues": len(result.issues),
        },
        "issues": issues,
    }


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="lastmod")
def cli() -> None:
    """lastmod reports the most recently changed file or directory in a tree."""


@cli.command()
@click.option("-p", "--path", "base_path", required=True, help="Directory to search.")
@click.option(
    "-b",
    "--min-date",
    type=str,
    help="Ignore entries modified before this date (format YYYY-MM-DD).",
)
@click.option("-e", "--exclude", "exclude_pattern", type=str, help="Ignore entries whose name contains this text.")
@click.option("-v", "--verbose", is_flag=True, help="Report each directory as it is searched.")
@click.option(
    "--follow-symlinks/--no-follow-symlinks",
    default=True,
    help="Resolve symbolic links when reading entry metadata.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress summary and warning output.")
@click.pass_context
def find(
    ctx: click.Context,
    base_path: str,
    min_date: str | None,
    exclude_pattern: str | None,
    verbose: bool,
    follow_symlinks: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Report the most recently modified or created entry under PATH.

    Args:
        ctx: Click context for parameter inspection.
        base_path: Root directory to scan.
        min_date: Optional `YYYY-MM-DD` cutoff; older entries are ignored.
        exclude_pattern: Optional substring; matching entry names are ignored.
        verbose: When True, report each directory entered.
        follow_symlinks: When True, symbolic links are resolved.
        json_output: When True, emit JSON instead of textual output.
        quiet: When True, suppress the summary line and warnings.

    Raises:
        click.ClickException: If options are invalid or PATH cannot be opened.
    """

    json_enabled = json_output
    try:
        config = ConfigManager().load()

        def _explicit(name: str) -> bool:
            return ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE

        quiet_enabled = quiet if _explicit("quiet") else config.cli.quiet_default
        if json_output:
            if _explicit("quiet") and quiet_enabled:
                raise click.ClickException("--json cannot be combined with --quiet.")
            quiet_enabled = False

        _configure_logging("ERROR" if quiet_enabled else config.logging.level)

        traversal = TraversalConfig.build(
            base_path=base_path,
            min_date=min_date,
            exclude_pattern=exclude_pattern if exclude_pattern is not None else config.scan.exclude_pattern,
            verbose=verbose if _explicit("verbose") else config.scan.verbose,
            follow_symlinks=follow_symlinks if _explicit("follow_symlinks") else config.scan.follow_symlinks,
        )
        result = find_latest(traversal, on_directory=_announce_directory)

        time_format = config.cli.time_format
        if json_output:
            console.print_json(data=_result_payload(result, time_format))
            return

        if result.found and result.modified_at is not None:
            console.print(
                f"File: {_display_path(result.path)} Date: {result.modified_at.strftime(time_format)}",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
        else:
            console.print("No file found", highlight=False)

        if not quiet_enabled:
            metrics = {
                "directories": result.directories_scanned,
                "entries": result.entries_seen,
                "eligible": result.entries_eligible,
                "issues": len(result.issues),
            }
            console.print(_format_summary_line("Find", result.root, metrics), soft_wrap=True)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except RootUnreadableError as exc:
        _handle_cli_error(
            f"Cannot open {_display_path(exc.path)}: {exc.reason}",
            code="root_unreadable",
            json_output=json_enabled,
            original=exc,
        )
    except ScanError as exc:
        _handle_cli_error(str(exc), code="scan_error", json_output=json_enabled, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while scanning: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.group()
def config() -> None:
    """Manage lastmod configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
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
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        file_data = manager.load_file_overrides()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'scan.verbose'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    previous = deepcopy(file_data)
    try:
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=LastmodConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == previous:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {escape('.'.join(segments))}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=LastmodConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
