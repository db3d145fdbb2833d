"""bzldeps CLI - Main entry point."""

import typer

from . import resolve_cmd, srcs_cmd

app = typer.Typer(
    name="bzldeps",
    help="bzldeps CLI - Resolve Python build rule dependencies",
    no_args_is_help=True,
    add_completion=False,
)

# Register all commands
app.command()(resolve_cmd.resolve)
app.command()(srcs_cmd.srcs)
app.command()(srcs_cmd.provides)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
