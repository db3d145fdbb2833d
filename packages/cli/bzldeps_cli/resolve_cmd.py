"""Resolve command - compute the deps attribute of every rule in a manifest."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from bzldeps_common import LOG_LEVELS, SrcsExpressionError, ValidationError
from bzldeps_common.logger import configure_logging
from bzldeps_sdk import RunReport, resolve_manifest
from bzldeps_sdk.resolve import load_build_file_directives

from .utils import (
    console,
    error,
    info,
    load_manifest_or_exit,
    resolve_repo_root,
    success,
    warning,
)


def _print_report(report: RunReport) -> None:
    for result in report.results:
        status = "[red]failed[/red]" if result.fatal else "[green]ok[/green]"
        console.print(f"\n[bold]{result.target}[/bold] ({status})")
        if result.deps:
            for dep in result.deps:
                console.print(f"  • {dep}")
        else:
            console.print("  [dim](no deps)[/dim]")
        for diagnostic in result.diagnostics:
            console.print(f"  [red]{diagnostic.kind}[/red]: {diagnostic.message}")


def resolve(
    manifest: Path = typer.Argument(..., help="Path to the resolution manifest (YAML)"),
    repo_root: Optional[Path] = typer.Option(
        None,
        "--repo-root",
        "-r",
        help="Repository root (default: manifest repo_root or the manifest's directory)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the resolved deps as YAML to this file",
    ),
    keep_going: bool = typer.Option(
        False,
        "--keep-going",
        "-k",
        help="Resolve remaining rules after a rule fails",
    ),
    scan_build_files: bool = typer.Option(
        False,
        "--scan-build-files",
        help="Also read '# gazelle:resolve' directives from build files",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for stderr logs"),
):
    """
    Resolve the imports of every rule into deps.

    \b
    Examples:
        bzldeps resolve deps.yaml
        bzldeps resolve deps.yaml --output resolved.yaml --keep-going
    """
    if log_level.upper() not in LOG_LEVELS:
        error(f"Invalid log level: '{log_level}'. Valid levels: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)
    configure_logging("bzldeps_cli", log_level)

    data = load_manifest_or_exit(manifest)
    root = resolve_repo_root(data, manifest, repo_root)

    try:
        overrides = None
        if scan_build_files:
            overrides = load_build_file_directives(root)
            info(f"Loaded {len(overrides)} resolve directive(s) from build files")
        report = resolve_manifest(data, root, keep_going=keep_going, overrides=overrides)
    except (SrcsExpressionError, ValidationError) as e:
        error(e.message)
        raise typer.Exit(1)

    _print_report(report)

    if report.fatal:
        failed = sum(1 for result in report.results if result.fatal)
        if report.stopped_early:
            warning("Stopped after the first failing rule (use --keep-going to continue)")
        error(f"{failed} rule(s) failed to resolve")
        raise typer.Exit(1)

    if output is not None:
        output.write_text(
            yaml.dump(report.deps_by_target(), default_flow_style=False, sort_keys=True)
        )
        success(f"Wrote resolved deps to {output}")
    success(f"Resolved {len(report.results)} rule(s)")
