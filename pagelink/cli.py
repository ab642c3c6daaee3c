"""Command-line interface for Pagelink.

Running ``pagelink`` in a project directory builds the landing page from
``config.yml`` and the selected theme. The command takes no arguments.
"""

from __future__ import annotations

from pathlib import Path

import click

SUCCESS_MESSAGE = "Site generated successfully!"


@click.command()
def cli():
    """Generate index.html and assets/ from config.yml and the selected theme."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        build_site(project_root)
    except BuildError as exc:
        click.echo(click.style(_one_line(str(exc)), fg="red"), err=True)
        raise SystemExit(1) from None
    click.echo(SUCCESS_MESSAGE)


def _one_line(message: str) -> str:
    """Collapse a possibly multi-line error message onto one line."""
    return " ".join(message.split())


def main():
    """Entry point for the CLI application."""
    cli()
