"""HTTP transport — one streamed PUT per upload, no retries.

Bridge boundary
---------------
``requests`` is the only network library the pipeline depends on, and only
through this module.  The pipeline talks to the ``Transport`` protocol, so
tests and callers can substitute any object with a matching ``send()``.

TLS
---
``https://`` traffic goes through ``TLSAdapter``, whose ``ssl.SSLContext``
pins an explicit minimum protocol version chosen once at construction.
Certificate and hostname verification stay on.

Streaming
---------
The request body is the open file handle.  ``requests`` sends file objects
chunk by chunk and derives ``Content-Length`` from the file size, so the
artifact is never held in memory.
"""

from __future__ import annotations

import logging
import ssl
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import requests
from requests.adapters import HTTPAdapter

from hashput.models.transfer import UploadRequest, UploadResult

if TYPE_CHECKING:
    from hashput.config import UploadSettings

logger = logging.getLogger(__name__)

DEFAULT_SERVER_CHECKSUM_HEADER = "X-Checksum-Sha256"

TLS_VERSIONS: dict[str, ssl.TLSVersion] = {
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}


class TransportError(RuntimeError):
    """Raised when the upload fails at the network level.

    Carries the elapsed time up to the failure for diagnostics.
    """

    def __init__(self, message: str, *, elapsed_seconds: float | None = None) -> None:
        super().__init__(message)
        self.elapsed_seconds = elapsed_seconds


@runtime_checkable
class Transport(Protocol):
    """Protocol for upload transports.

    Any object with a ``send(request) -> UploadResult`` method satisfies it.
    """

    def send(self, request: UploadRequest) -> UploadResult:
        """Perform exactly one upload attempt.

        Raises
        ------
        TransportError
            On any network-level failure.
        """
        ...


def build_ssl_context(min_tls_version: str = "TLSv1.2") -> ssl.SSLContext:
    """Return a verifying client context with an explicit minimum TLS version."""
    try:
        minimum = TLS_VERSIONS[min_tls_version]
    except KeyError:
        raise ValueError(
            f"Unsupported TLS version {min_tls_version!r}; "
            f"expected one of {sorted(TLS_VERSIONS)}"
        ) from None
    context = ssl.create_default_context()
    context.minimum_version = minimum
    return context


class TLSAdapter(HTTPAdapter):
    """HTTPAdapter that hands a preconfigured SSLContext to urllib3."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs: Any) -> None:
        self.ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        kwargs["ssl_context"] = self.ssl_context
        super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args: Any, **kwargs: Any) -> Any:
        kwargs["ssl_context"] = self.ssl_context
        return super().proxy_manager_for(*args, **kwargs)


class HttpTransport:
    """Streams an UploadRequest to the server with ``requests``.

    Parameters
    ----------
    min_tls_version:
        ``"TLSv1.2"`` or ``"TLSv1.3"``.
    timeout_seconds:
        Connect/read timeout.  ``None`` waits for the server indefinitely.
    server_checksum_header:
        Response header holding the server-computed SHA-256, if any.
    user_agent:
        Value of the ``User-Agent`` request header.
    session:
        Optional pre-built session.  The TLS adapter is mounted on it.
    """

    def __init__(
        self,
        *,
        min_tls_version: str = "TLSv1.2",
        timeout_seconds: float | None = None,
        server_checksum_header: str = DEFAULT_SERVER_CHECKSUM_HEADER,
        user_agent: str = "hashput",
        session: requests.Session | None = None,
    ) -> None:
        self._min_tls_version = min_tls_version
        self._timeout = timeout_seconds
        self._server_checksum_header = server_checksum_header

        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.session.mount(
            "https://",
            TLSAdapter(build_ssl_context(min_tls_version), max_retries=0),
        )
        logger.debug(
            "HttpTransport: min_tls=%s timeout=%s", min_tls_version, timeout_seconds
        )

    @classmethod
    def from_settings(cls, settings: UploadSettings) -> HttpTransport:
        """Build a transport from the TLS, timeout and header fields of *settings*."""
        return cls(
            min_tls_version=settings.min_tls_version,
            timeout_seconds=settings.timeout_seconds,
            server_checksum_header=settings.server_checksum_header,
            user_agent=settings.user_agent,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def send(self, request: UploadRequest) -> UploadResult:
        """Stream the artifact to ``request.destination`` in a single PUT.

        Raises
        ------
        TransportError
            On DNS, TLS, connection or timeout errors.
        OSError
            If the artifact cannot be opened for streaming.
        """
        artifact = request.body
        logger.info(
            "Uploading %s (%d bytes) to %s",
            artifact.display_name,
            artifact.size_bytes,
            request.destination,
        )

        with artifact.path.open("rb") as fh:
            started = time.perf_counter()
            try:
                response = self.session.request(
                    request.method,
                    request.destination,
                    data=fh,
                    headers=request.headers,
                    timeout=self._timeout,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                elapsed = time.perf_counter() - started
                logger.error("Upload of %s failed after %.3fs: %s", artifact.display_name, elapsed, exc)
                raise TransportError(
                    f"{type(exc).__name__}: {exc}", elapsed_seconds=elapsed
                ) from exc
            body = response.text
            elapsed = time.perf_counter() - started

        # A blank header counts as absent.
        server_sha256 = (response.headers.get(self._server_checksum_header) or "").strip() or None
        logger.info(
            "Server answered HTTP %d in %.3fs", response.status_code, elapsed
        )
        return UploadResult(
            status_code=response.status_code,
            elapsed_seconds=elapsed,
            server_sha256=server_sha256,
            body=body,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"HttpTransport(min_tls={self._min_tls_version!r}, "
            f"timeout={self._timeout!r})"
        )
