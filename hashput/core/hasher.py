"""Concurrent multi-algorithm file digests.

One worker thread per algorithm, each with its own file handle.  The caller
is blocked on a join barrier until every worker has finished; a single
failing worker fails the whole computation and no partial DigestSet is
ever returned.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import BinaryIO

from hashput.models.artifacts import DIGEST_ALGORITHMS, DigestSet, SourceArtifact

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024

Opener = Callable[[Path], BinaryIO]


def _open_binary(path: Path) -> BinaryIO:
    return path.open("rb")


class DigestComputationError(RuntimeError):
    """Raised when a digest worker cannot read the artifact in full."""

    def __init__(self, message: str, *, algorithm: str | None = None) -> None:
        super().__init__(message)
        self.algorithm = algorithm


class DigestEngine:
    """Computes MD5, SHA-1 and SHA-256 of an artifact concurrently.

    Parameters
    ----------
    chunk_size:
        Bytes read per ``read()`` call in each worker.
    opener:
        Callable returning a binary file handle for a path.  Each worker
        calls it once; the handle is closed by the worker.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        opener: Opener = _open_binary,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._opener = opener

    def compute_all(self, artifact: SourceArtifact) -> DigestSet:
        """Digest *artifact* with every algorithm and join the results.

        Raises
        ------
        DigestComputationError
            If any worker fails.  The first failure observed is raised once
            all workers have been joined.
        """
        digests: dict[str, str] = {}
        first_error: BaseException | None = None
        failed_algorithm: str | None = None

        with ThreadPoolExecutor(
            max_workers=len(DIGEST_ALGORITHMS), thread_name_prefix="hashput-digest"
        ) as pool:
            futures: dict[Future[str], str] = {
                pool.submit(self._digest_one, algorithm, artifact): algorithm
                for algorithm in DIGEST_ALGORITHMS
            }
            for future in as_completed(futures):
                algorithm = futures[future]
                exc = future.exception()
                if exc is None:
                    digests[algorithm] = future.result()
                elif first_error is None:
                    first_error, failed_algorithm = exc, algorithm
                else:
                    logger.debug("Additional %s worker failure: %s", algorithm, exc)

        if first_error is not None:
            logger.error(
                "Digest computation failed for %s (%s): %s",
                artifact.display_name,
                failed_algorithm,
                first_error,
            )
            if isinstance(first_error, DigestComputationError):
                raise first_error
            raise DigestComputationError(
                f"{failed_algorithm} digest of {artifact.path} failed: {first_error}",
                algorithm=failed_algorithm,
            ) from first_error

        logger.info("Computed digests for %s (%d bytes)", artifact.display_name, artifact.size_bytes)
        return DigestSet(**digests)

    def _digest_one(self, algorithm: str, artifact: SourceArtifact) -> str:
        """Worker body: read the whole file through a single hash object."""
        h = hashlib.new(algorithm)
        total = 0
        with self._opener(artifact.path) as fh:
            for block in iter(lambda: fh.read(self._chunk_size), b""):
                h.update(block)
                total += len(block)
        if total != artifact.size_bytes:
            raise DigestComputationError(
                f"{algorithm} worker read {total} bytes from {artifact.path}, "
                f"expected {artifact.size_bytes} (file changed while hashing)",
                algorithm=algorithm,
            )
        logger.debug("%s worker finished %s", algorithm, artifact.display_name)
        return h.hexdigest()


def digest_file(path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> DigestSet:
    """Resolve *path* and return its DigestSet."""
    return DigestEngine(chunk_size).compute_all(SourceArtifact.resolve(path))
