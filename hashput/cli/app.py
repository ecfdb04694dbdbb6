"""Main Typer application — registers the CLI commands and logging.

Entry point: ``hashput`` (configured via pyproject.toml console scripts).
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from hashput import __version__
from hashput.cli.commands.digest import digest_cmd
from hashput.cli.commands.upload import upload_cmd
from hashput.config import settings

app = typer.Typer(
    name="hashput",
    help="hashput: checksum-verified artifact uploads over HTTPS.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="upload", help="Upload a file and verify its checksums.")(upload_cmd)
app.command(name="digest", help="Print a file's MD5, SHA-1 and SHA-256.")(digest_cmd)


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hashput {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: HASHPUT_LOG_LEVEL or INFO).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Checksum-verified artifact uploads over HTTPS."""
    configure_logging(log_level or settings.log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
