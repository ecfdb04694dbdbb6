"""Builds the PUT request descriptor from digests, credential and destination.

Pure construction: no file content is read and no network call is made.
"""

from __future__ import annotations

from urllib.parse import quote, urlsplit

from hashput.models.artifacts import DigestSet, SourceArtifact
from hashput.models.transfer import UploadRequest

DEFAULT_API_KEY_HEADER = "X-JFrog-Art-Api"


class RequestValidationError(RuntimeError):
    """Raised when the destination or credential is unusable."""


class RequestAssembler:
    """Turns a DigestSet, an API credential and a destination into an UploadRequest.

    Parameters
    ----------
    api_key_header:
        Name of the header carrying the opaque API credential.
    """

    def __init__(self, api_key_header: str = DEFAULT_API_KEY_HEADER) -> None:
        if not api_key_header:
            raise ValueError("api_key_header must not be empty")
        self._api_key_header = api_key_header

    @property
    def api_key_header(self) -> str:
        return self._api_key_header

    def check(self, destination: str | None, credential: str | None) -> None:
        """Validate destination and credential without building anything.

        Raises
        ------
        RequestValidationError
            If the destination is not an ``https://`` URL with a host, or
            the credential is empty.
        """
        if not destination:
            raise RequestValidationError("Destination URL is required")
        if not destination.lower().startswith("https://"):
            raise RequestValidationError(
                f"Destination must use https:// (got {destination!r})"
            )
        if not urlsplit(destination).netloc:
            raise RequestValidationError(f"Destination has no host: {destination!r}")
        if credential is None or not credential.strip():
            raise RequestValidationError("API credential must not be empty")

    def build(
        self,
        destination: str,
        digest_set: DigestSet,
        credential: str,
        artifact: SourceArtifact,
    ) -> UploadRequest:
        """Assemble the request for a single upload.

        A destination ending in ``/`` is treated as a folder and the
        artifact's display name is appended.
        """
        self.check(destination, credential)
        if destination.endswith("/"):
            destination = destination + quote(artifact.display_name)

        headers = digest_set.checksum_headers()
        headers[self._api_key_header] = credential
        return UploadRequest(destination=destination, headers=headers, body=artifact)
