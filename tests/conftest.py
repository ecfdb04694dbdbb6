"""Shared test fixtures for hashput."""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, BinaryIO

import pytest
from requests import Response
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from hashput.bridge.transport import HttpTransport
from hashput.models.artifacts import DigestSet, SourceArtifact
from hashput.models.transfer import UploadRequest, UploadResult

TEN_BYTES = b"0123456789"
DESTINATION = "https://artifacts.example.test/libs-release-local/pkg/app.bin"
API_KEY = "AKCp-test-credential"


# ---------------------------------------------------------------------------
# Files and models
# ---------------------------------------------------------------------------


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write *content* to a file under tmp_path."""

    def _factory(content: bytes = TEN_BYTES, name: str = "app.bin") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _factory


@pytest.fixture
def ten_byte_file(make_file: Callable[..., Path]) -> Path:
    """The canonical 10-byte upload fixture ("0123456789")."""
    return make_file(TEN_BYTES)


@pytest.fixture
def ten_byte_artifact(ten_byte_file: Path) -> SourceArtifact:
    return SourceArtifact.resolve(ten_byte_file)


@pytest.fixture
def ten_byte_digests() -> DigestSet:
    """Digests of TEN_BYTES computed directly with hashlib."""
    return DigestSet(
        md5=hashlib.md5(TEN_BYTES).hexdigest(),
        sha1=hashlib.sha1(TEN_BYTES).hexdigest(),
        sha256=hashlib.sha256(TEN_BYTES).hexdigest(),
    )


@pytest.fixture
def make_result() -> Callable[..., UploadResult]:
    """Factory fixture: build an UploadResult with sensible defaults."""

    def _factory(**overrides: Any) -> UploadResult:
        defaults: dict[str, Any] = {
            "status_code": 201,
            "elapsed_seconds": 0.05,
            "server_sha256": None,
            "body": "",
        }
        defaults.update(overrides)
        return UploadResult(**defaults)

    return _factory


# ---------------------------------------------------------------------------
# Transport doubles
# ---------------------------------------------------------------------------


class FakeTransport:
    """Transport double that records calls and returns a canned result."""

    def __init__(
        self,
        result: UploadResult | None = None,
        exc: BaseException | None = None,
    ) -> None:
        self.result = result or UploadResult(status_code=201, elapsed_seconds=0.01)
        self.exc = exc
        self.calls: list[UploadRequest] = []

    def send(self, request: UploadRequest) -> UploadResult:
        self.calls.append(request)
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def make_fake_transport() -> Callable[..., FakeTransport]:
    """Factory fixture: a FakeTransport returning *result* or raising *exc*."""

    def _factory(
        result: UploadResult | None = None,
        exc: BaseException | None = None,
    ) -> FakeTransport:
        return FakeTransport(result=result, exc=exc)

    return _factory


@pytest.fixture
def fake_transport(make_fake_transport: Callable[..., FakeTransport]) -> FakeTransport:
    return make_fake_transport()


class StubServerAdapter(BaseAdapter):
    """requests adapter standing in for an artifact repository.

    Reads the streamed request body, records it, and answers with a fixed
    status.  With ``echo_sha256`` it returns the client's
    ``X-Checksum-Sha256`` header, as a verifying server would.
    """

    def __init__(
        self,
        *,
        status_code: int = 201,
        body: bytes = b"",
        echo_sha256: bool = False,
        response_headers: dict[str, str] | None = None,
        exc: BaseException | None = None,
    ) -> None:
        super().__init__()
        self.status_code = status_code
        self.body = body
        self.echo_sha256 = echo_sha256
        self.response_headers = response_headers or {}
        self.exc = exc
        self.requests: list[Any] = []
        self.received: list[bytes] = []
        self.body_types: list[type] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc

        self.body_types.append(type(request.body))
        if hasattr(request.body, "read"):
            data = request.body.read()
        else:
            data = request.body or b""
        self.received.append(data)

        headers = dict(self.response_headers)
        if self.echo_sha256 and "X-Checksum-Sha256" in request.headers:
            headers["X-Checksum-Sha256"] = request.headers["X-Checksum-Sha256"]

        response = Response()
        response.status_code = self.status_code
        response.headers = CaseInsensitiveDict(headers)
        response._content = self.body
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass


@pytest.fixture
def make_http_transport() -> Iterator[Callable[..., tuple[HttpTransport, StubServerAdapter]]]:
    """Factory fixture: an HttpTransport whose https:// traffic hits a stub server."""
    created: list[HttpTransport] = []

    def _factory(
        *, transport_kwargs: dict[str, Any] | None = None, **adapter_kwargs: Any
    ) -> tuple[HttpTransport, StubServerAdapter]:
        transport = HttpTransport(**(transport_kwargs or {}))
        adapter = StubServerAdapter(**adapter_kwargs)
        transport.session.mount("https://", adapter)
        created.append(transport)
        return transport, adapter

    yield _factory

    for transport in created:
        transport.close()


# ---------------------------------------------------------------------------
# File openers for digest workers
# ---------------------------------------------------------------------------


class FlakyOpener:
    """Opener that raises on its Nth call, simulating a file vanishing mid-run."""

    def __init__(self, fail_on_call: int = 2) -> None:
        self._fail_on_call = fail_on_call
        self._calls = 0
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return self._calls

    def __call__(self, path: Path) -> BinaryIO:
        with self._lock:
            self._calls += 1
            call = self._calls
        if call == self._fail_on_call:
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        return path.open("rb")


@pytest.fixture
def flaky_opener() -> FlakyOpener:
    return FlakyOpener()
