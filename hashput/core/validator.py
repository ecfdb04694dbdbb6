"""Interprets a transport result into a terminal UploadOutcome."""

from __future__ import annotations

import logging

from hashput.models.artifacts import DigestSet
from hashput.models.outcomes import (
    IntegrityMismatch,
    Success,
    TransportFailure,
    UploadOutcome,
)
from hashput.models.transfer import UploadResult

logger = logging.getLogger(__name__)

EXPECTED_STATUS = 201


class ResponseValidator:
    """Classifies an UploadResult against the locally computed digests.

    Rules, in order:

    1. Status other than 201 is a ``TransportFailure`` carrying status and body.
    2. A server SHA-256 that differs (case-insensitively) from the local one
       is an ``IntegrityMismatch``.
    3. Otherwise ``Success``.  A missing server checksum is not an error.
    """

    def __init__(self, expected_status: int = EXPECTED_STATUS) -> None:
        self._expected_status = expected_status

    def evaluate(self, result: UploadResult, local_digests: DigestSet) -> UploadOutcome:
        if result.status_code != self._expected_status:
            logger.error(
                "Upload rejected: HTTP %d after %.3fs", result.status_code, result.elapsed_seconds
            )
            return TransportFailure(
                cause=f"Server answered HTTP {result.status_code}, expected {self._expected_status}",
                status_code=result.status_code,
                body=result.body,
                elapsed_seconds=result.elapsed_seconds,
            )

        observed = (result.server_sha256 or "").strip().lower() or None
        if observed is not None and observed != local_digests.sha256:
            logger.error(
                "Integrity mismatch: local sha256=%s server sha256=%s",
                local_digests.sha256,
                observed,
            )
            return IntegrityMismatch(
                expected=local_digests.sha256,
                observed=observed,
                result=result,
            )

        if observed is None:
            logger.info("Server sent no checksum header; skipping server-side verification")
        return Success(result=result)
