#!/usr/bin/env python3
"""
Main CLI entry point using Typer.
"""

import sys

import typer

from manila_csi.cli.commands import access

app = typer.Typer(
    name="manila-csi",
    help="Manila CSI share access tool",
    add_completion=False,
)

# Add command groups
app.add_typer(access.app, name="access", help="Access rule commands")


def main() -> int:
    """Main entry point."""
    try:
        app()
        return 0
    except KeyboardInterrupt:
        typer.echo("\nOperation cancelled by user", err=True)
        return 130
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
