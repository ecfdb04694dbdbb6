"""``hashput digest FILE`` — print MD5, SHA-1 and SHA-256 without uploading."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from hashput.cli.renderer import OutcomeRenderer
from hashput.config import settings
from hashput.core.hasher import DigestComputationError, digest_file
from hashput.models.artifacts import ArtifactValidationError
from hashput.models.outcomes import EXIT_CODES, OutcomeKind

console = Console()


def digest_cmd(
    source: Path = typer.Argument(
        ...,
        help="Local file to digest.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the digests as a JSON object.",
    ),
) -> None:
    """Compute the checksums that ``upload`` would send for FILE."""
    try:
        digests = digest_file(source, chunk_size=settings.chunk_size)
    except ArtifactValidationError as exc:
        console.print(f"[bold yellow]Invalid input:[/bold yellow] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_CODES[OutcomeKind.VALIDATION_FAILURE])
    except DigestComputationError as exc:
        console.print(f"[bold red]Could not read source file:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_CODES[OutcomeKind.IO_FAILURE])

    if as_json:
        typer.echo(json.dumps(digests.as_mapping(), indent=2))
        return
    OutcomeRenderer(console=console).print_digests(digests, title=source.name)
