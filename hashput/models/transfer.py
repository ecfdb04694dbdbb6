"""Upload request and transport result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hashput.models.artifacts import SourceArtifact


class UploadRequest(BaseModel):
    """A fully assembled PUT, ready for exactly one Transport call.

    The body is the artifact reference, not its bytes.  The transport opens
    the file and streams it; nothing here holds file content in memory.
    """

    model_config = ConfigDict(frozen=True)

    destination: str
    method: str = "PUT"
    headers: dict[str, str]
    body: SourceArtifact


class UploadResult(BaseModel):
    """What came back from the server for a single upload attempt."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    elapsed_seconds: float
    server_sha256: str | None = None  # from the server checksum header, when present
    body: str = ""
