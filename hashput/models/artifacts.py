"""Source artifact and digest models (immutable once resolved)."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

# Fixed algorithm set, in header order.
DIGEST_ALGORITHMS: tuple[str, ...] = ("md5", "sha1", "sha256")

CHECKSUM_HEADERS: dict[str, str] = {
    "md5": "X-Checksum-Md5",
    "sha1": "X-Checksum-Sha1",
    "sha256": "X-Checksum-Sha256",
}

_HEX_LENGTHS: dict[str, int] = {"md5": 32, "sha1": 40, "sha256": 64}
_LOWER_HEX = re.compile(r"^[0-9a-f]+$")


class ArtifactValidationError(RuntimeError):
    """Raised when a source path cannot be resolved to a regular file."""


class SourceArtifact(BaseModel):
    """A local file selected for upload.

    Resolved once at the start of a run; the size is captured at resolution
    time and used to detect files that change while being hashed.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int
    display_name: str

    @classmethod
    def resolve(cls, path: Path | str, display_name: str | None = None) -> SourceArtifact:
        """Resolve *path* into a SourceArtifact.

        Raises
        ------
        ArtifactValidationError
            If the path does not exist or is not a regular file.
        """
        p = Path(path)
        if not p.exists():
            raise ArtifactValidationError(f"Source file does not exist: {p}")
        if p.is_dir():
            raise ArtifactValidationError(f"Source path is a directory: {p}")
        if not p.is_file():
            raise ArtifactValidationError(f"Source path is not a regular file: {p}")
        resolved = p.resolve()
        return cls(
            path=resolved,
            size_bytes=resolved.stat().st_size,
            display_name=display_name or resolved.name,
        )


class DigestSet(BaseModel):
    """MD5, SHA-1 and SHA-256 of one artifact, as lowercase hex.

    All three digests are required; a partial set cannot be constructed.
    """

    model_config = ConfigDict(frozen=True)

    md5: str
    sha1: str
    sha256: str

    @field_validator("md5", "sha1", "sha256")
    @classmethod
    def _lowercase_hex(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError(f"{info.field_name} digest must not be empty")
        if len(value) != _HEX_LENGTHS[info.field_name] or not _LOWER_HEX.match(value):
            raise ValueError(f"{info.field_name} digest must be lowercase hex")
        return value

    def as_mapping(self) -> dict[str, str]:
        """Return ``{algorithm: hexdigest}`` in the fixed algorithm order."""
        return {name: getattr(self, name) for name in DIGEST_ALGORITHMS}

    def checksum_headers(self) -> dict[str, str]:
        """Return the ``X-Checksum-*`` request headers for this digest set."""
        return {CHECKSUM_HEADERS[name]: hexdigest for name, hexdigest in self.as_mapping().items()}
