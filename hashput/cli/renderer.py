"""Rich terminal renderer for upload outcomes and digest sets.

Color scheme
------------
- green     : SUCCESS
- bold red  : INTEGRITY_MISMATCH
- red       : TRANSPORT_FAILURE, IO_FAILURE
- yellow    : VALIDATION_FAILURE
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hashput.models.artifacts import DigestSet, SourceArtifact
from hashput.models.outcomes import (
    IntegrityMismatch,
    IOFailure,
    OutcomeKind,
    Success,
    TransportFailure,
    UploadOutcome,
    ValidationFailure,
)

_KIND_STYLES: dict[OutcomeKind, str] = {
    OutcomeKind.SUCCESS: "green",
    OutcomeKind.INTEGRITY_MISMATCH: "bold red",
    OutcomeKind.TRANSPORT_FAILURE: "red",
    OutcomeKind.IO_FAILURE: "red",
    OutcomeKind.VALIDATION_FAILURE: "yellow",
}

_KIND_TITLES: dict[OutcomeKind, str] = {
    OutcomeKind.SUCCESS: "Upload verified",
    OutcomeKind.INTEGRITY_MISMATCH: "INTEGRITY MISMATCH",
    OutcomeKind.TRANSPORT_FAILURE: "Upload failed",
    OutcomeKind.IO_FAILURE: "Could not read source file",
    OutcomeKind.VALIDATION_FAILURE: "Invalid input",
}

# Response bodies can be whole HTML error pages.
_MAX_BODY_CHARS = 500


class OutcomeRenderer:
    """Renders UploadOutcome and DigestSet values as Rich output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_digests(self, digests: DigestSet, title: str = "Checksums") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Algorithm", style="cyan")
        table.add_column("Digest", style="green")
        for algorithm, hexdigest in digests.as_mapping().items():
            table.add_row(algorithm.upper(), hexdigest)
        return table

    def render_confirmation(self, artifact: SourceArtifact, destination: str) -> Panel:
        lines = [
            f"[bold]File:[/bold]        {escape(str(artifact.path))}",
            f"[bold]Size:[/bold]        {artifact.size_bytes} bytes",
            f"[bold]Destination:[/bold] {escape(destination)}",
        ]
        return Panel(
            "\n".join(lines),
            title="[bold]About to upload[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )

    def render_outcome(self, outcome: UploadOutcome) -> Panel:
        """Render *outcome* as a bordered panel."""
        lines: list[str] = []

        if isinstance(outcome, Success):
            lines += [
                f"[bold]Status:[/bold]  HTTP {outcome.result.status_code}",
                f"[bold]Elapsed:[/bold] {outcome.result.elapsed_seconds:.3f}s",
            ]
            if outcome.result.server_sha256:
                lines.append("[bold]Server checksum:[/bold] [green]matches[/green]")
            else:
                lines.append("[bold]Server checksum:[/bold] [dim]not provided[/dim]")
        elif isinstance(outcome, IntegrityMismatch):
            lines += [
                f"[bold]Local SHA-256:[/bold]  {outcome.expected}",
                f"[bold]Server SHA-256:[/bold] {escape(outcome.observed)}",
                "",
                "[bold red]The server stored different bytes than were read from disk.[/bold red]",
            ]
        elif isinstance(outcome, TransportFailure):
            lines.append(f"[bold]Cause:[/bold] {escape(outcome.cause)}")
            if outcome.elapsed_seconds is not None:
                lines.append(f"[bold]Elapsed:[/bold] {outcome.elapsed_seconds:.3f}s")
            if outcome.body:
                body = outcome.body
                if len(body) > _MAX_BODY_CHARS:
                    body = body[:_MAX_BODY_CHARS] + "..."
                lines += ["", "[bold]Response body:[/bold]", escape(body)]
        elif isinstance(outcome, IOFailure):
            lines.append(f"[bold]Cause:[/bold] {escape(outcome.cause)}")
            if outcome.algorithm:
                lines.append(f"[bold]Worker:[/bold] {outcome.algorithm}")
        elif isinstance(outcome, ValidationFailure):
            lines.append(f"[bold]Reason:[/bold] {escape(outcome.reason)}")

        style = _KIND_STYLES[outcome.kind]
        return Panel(
            "\n".join(lines),
            title=f"[{style}]{_KIND_TITLES[outcome.kind]}[/{style}]",
            subtitle=f"exit code {outcome.exit_code}",
            border_style=style,
            padding=(1, 2),
        )

    def print_outcome(self, outcome: UploadOutcome) -> None:
        self.console.print(self.render_outcome(outcome))

    def print_digests(self, digests: DigestSet, title: str = "Checksums") -> None:
        self.console.print(self.render_digests(digests, title))
