"""Shared console helpers for CLI commands."""

from pathlib import Path
from typing import Optional

import typer
from bzldeps_common import ValidationError
from bzldeps_schema import Manifest, load_manifest
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    console.print(f"[bold green]✓[/bold green] {message}")


def info(message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {message}")


def warning(message: str) -> None:
    console.print(f"[bold yellow]⚠[/bold yellow] {message}")


def error(message: str) -> None:
    err_console.print(f"[bold red]✗[/bold red] {message}")


def load_manifest_or_exit(path: Path) -> Manifest:
    """Load a manifest, printing the problem and exiting with status 1 on failure."""
    try:
        return load_manifest(path)
    except ValidationError as e:
        error(e.message)
        raise typer.Exit(1)


def resolve_repo_root(manifest: Manifest, manifest_path: Path, repo_root: Optional[Path]) -> Path:
    """Pick the repository root: explicit option, manifest setting, or the manifest's directory."""
    if repo_root is not None:
        return repo_root.resolve()
    if manifest.repo_root:
        return (manifest_path.parent / manifest.repo_root).resolve()
    return manifest_path.parent.resolve()
