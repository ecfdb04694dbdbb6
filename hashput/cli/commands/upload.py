"""``hashput upload FILE DESTINATION`` — checksum-verified upload.

Resolves the file, asks for confirmation (unless ``--force``), computes
MD5/SHA-1/SHA-256, PUTs the file with ``X-Checksum-*`` headers and checks
the server's answer.  The process exit code reflects the outcome kind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from hashput.bridge.transport import TLS_VERSIONS, HttpTransport
from hashput.cli.renderer import OutcomeRenderer
from hashput.config import settings
from hashput.core.pipeline import ConfirmationPolicy, UploadPipeline, auto_approve
from hashput.models.artifacts import SourceArtifact

console = Console()


def _interactive_confirm(renderer: OutcomeRenderer) -> ConfirmationPolicy:
    """Confirmation policy that shows the upload and asks the operator."""

    def _confirm(artifact: SourceArtifact, destination: str) -> bool:
        renderer.console.print(renderer.render_confirmation(artifact, destination))
        return typer.confirm("Proceed with upload?", default=False)

    return _confirm


def upload_cmd(
    source: Path = typer.Argument(
        ...,
        help="Local file to upload.",
    ),
    destination: str = typer.Argument(
        ...,
        help="https:// URL to PUT the file to. A trailing '/' appends the file name.",
    ),
    api_key: str = typer.Option(
        "",
        "--api-key",
        "-k",
        envvar="HASHPUT_API_KEY",
        help="API credential sent in the API-key header.",
        show_default=False,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Upload without asking for confirmation.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the outcome as JSON instead of a panel.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Network timeout in seconds (default: wait indefinitely).",
    ),
    min_tls: Optional[str] = typer.Option(
        None,
        "--min-tls",
        help="Minimum TLS version: TLSv1.2 or TLSv1.3.",
    ),
) -> None:
    """Upload FILE to DESTINATION and verify its checksums."""
    if min_tls is not None and min_tls not in TLS_VERSIONS:
        raise typer.BadParameter(
            f"expected one of {', '.join(sorted(TLS_VERSIONS))}", param_hint="--min-tls"
        )

    overrides: dict[str, object] = {}
    if timeout is not None:
        overrides["timeout_seconds"] = timeout
    if min_tls is not None:
        overrides["min_tls_version"] = min_tls
    run_settings = settings.model_copy(update=overrides)

    renderer = OutcomeRenderer(console=console)
    confirm = auto_approve if force else _interactive_confirm(renderer)

    with HttpTransport.from_settings(run_settings) as transport:
        pipeline = UploadPipeline.from_settings(run_settings, confirm=confirm, transport=transport)
        outcome = pipeline.run(source, destination, api_key or run_settings.api_key)

    if as_json:
        typer.echo(outcome.model_dump_json(indent=2))
    else:
        renderer.print_outcome(outcome)

    raise typer.Exit(code=outcome.exit_code)
