"""Srcs and provides commands - inspect what rules contain and publish."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from bzldeps_common import SrcsExpressionError
from bzldeps_sdk import collect_provides, evaluate_srcs, rules_from_manifest

from .utils import console, error, load_manifest_or_exit, resolve_repo_root


def srcs(
    expression: str = typer.Argument(..., help='srcs expression, e.g. \'glob(["**/*.py"])\''),
    package: str = typer.Option("", "--package", "-p", help="Package the expression belongs to"),
    repo_root: Path = typer.Option(Path("."), "--repo-root", "-r", help="Repository root"),
):
    """
    Print the files a srcs expression expands to.

    \b
    Examples:
        bzldeps srcs 'glob(["**/*.py"], exclude=["**/*_test.py"])' --package app
    """
    try:
        files = evaluate_srcs(expression, repo_root.resolve(), package.strip("/"))
    except SrcsExpressionError as e:
        error(e.message)
        raise typer.Exit(1)

    for path in files:
        typer.echo(path)


def provides(
    manifest: Path = typer.Argument(..., help="Path to the resolution manifest (YAML)"),
    repo_root: Optional[Path] = typer.Option(None, "--repo-root", "-r", help="Repository root"),
):
    """
    Print the import names each rule of a manifest publishes.
    """
    data = load_manifest_or_exit(manifest)
    root = resolve_repo_root(data, manifest, repo_root)

    try:
        published = collect_provides(rules_from_manifest(data), root)
    except SrcsExpressionError as e:
        error(e.message)
        raise typer.Exit(1)

    for target, specs in published.items():
        console.print(f"[bold]{escape(target)}[/bold]")
        if specs is None:
            console.print("  [dim](not indexed)[/dim]")
            continue
        for spec in specs:
            typer.echo(f"  • {spec.imp}")
