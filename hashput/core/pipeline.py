"""Upload pipeline — resolve, hash, assemble, upload, validate.

Drives a single run through the state machine::

    IDLE -> RESOLVED -> HASHING -> ASSEMBLING -> UPLOADING -> terminal

Every failure is converted into exactly one terminal ``UploadOutcome``; the
pipeline never retries and never loops.  Interactive confirmation is an
injected ``ConfirmationPolicy`` so the pipeline itself performs no console
I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from hashput.bridge.transport import HttpTransport, Transport, TransportError
from hashput.config import UploadSettings
from hashput.core.assembler import RequestAssembler, RequestValidationError
from hashput.core.hasher import DigestComputationError, DigestEngine
from hashput.core.validator import ResponseValidator
from hashput.models.artifacts import ArtifactValidationError, SourceArtifact
from hashput.models.outcomes import (
    IOFailure,
    TransportFailure,
    UploadOutcome,
    ValidationFailure,
)
from hashput.models.pipeline import VALID_TRANSITIONS, PipelineState, StateTransition

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested pipeline state transition is not valid."""


class ConfirmationPolicy(Protocol):
    """Decides whether a resolved upload may proceed."""

    def __call__(self, artifact: SourceArtifact, destination: str) -> bool:
        ...


def auto_approve(artifact: SourceArtifact, destination: str) -> bool:
    """Confirmation policy that never asks."""
    return True


class UploadPipeline:
    """Runs one checksum-verified upload and returns its outcome.

    A pipeline instance is single-use: ``run()`` may be called once.

    Parameters
    ----------
    transport:
        Performs the network call.  Not closed by the pipeline.
    engine:
        Digest engine; a default ``DigestEngine`` when omitted.
    assembler:
        Request assembler; a default ``RequestAssembler`` when omitted.
    validator:
        Response validator; a default ``ResponseValidator`` when omitted.
    confirm:
        Confirmation policy consulted after input validation and before
        any file content is read.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        engine: DigestEngine | None = None,
        assembler: RequestAssembler | None = None,
        validator: ResponseValidator | None = None,
        confirm: ConfirmationPolicy = auto_approve,
    ) -> None:
        self.transport = transport
        self.engine = engine or DigestEngine()
        self.assembler = assembler or RequestAssembler()
        self.validator = validator or ResponseValidator()
        self._confirm = confirm
        self._state = PipelineState.IDLE
        self._history: list[StateTransition] = []

    @classmethod
    def from_settings(
        cls,
        settings: UploadSettings,
        *,
        confirm: ConfirmationPolicy = auto_approve,
        transport: Transport | None = None,
    ) -> UploadPipeline:
        """Build a pipeline configured from *settings*.

        Uses *transport* when given, otherwise a new ``HttpTransport`` that the
        caller is responsible for closing.
        """
        return cls(
            transport or HttpTransport.from_settings(settings),
            engine=DigestEngine(settings.chunk_size),
            assembler=RequestAssembler(settings.api_key_header),
            confirm=confirm,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        """Transitions taken so far, oldest first."""
        return list(self._history)

    def _advance(self, target: PipelineState, detail: str | None = None) -> None:
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition pipeline from {self._state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )
        self._history.append(
            StateTransition(from_state=self._state, to_state=target, detail=detail)
        )
        logger.debug("Pipeline %s -> %s", self._state.value, target.value)
        self._state = target

    def _finish(self, outcome: UploadOutcome) -> UploadOutcome:
        detail = getattr(outcome, "reason", None) or getattr(outcome, "cause", None)
        self._advance(PipelineState(outcome.kind.value), detail)
        if outcome.ok:
            logger.info("Upload finished: %s", outcome.kind.value)
        else:
            logger.warning("Upload finished: %s (%s)", outcome.kind.value, detail or "")
        return outcome

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(
        self,
        path: Path | str,
        destination: str,
        credential: str | None,
    ) -> UploadOutcome:
        """Upload *path* to *destination* and return the terminal outcome."""
        if self._state != PipelineState.IDLE:
            raise InvalidTransitionError(
                f"Pipeline already ran (state={self._state.value}); build a new one"
            )

        # IDLE -> RESOLVED: fail fast before any content read or network call
        try:
            artifact = SourceArtifact.resolve(path)
            self.assembler.check(destination, credential)
        except (ArtifactValidationError, RequestValidationError) as exc:
            return self._finish(ValidationFailure(reason=str(exc)))
        self._advance(PipelineState.RESOLVED, artifact.display_name)

        if not self._confirm(artifact, destination):
            return self._finish(ValidationFailure(reason="upload declined by operator"))

        # RESOLVED -> HASHING
        self._advance(PipelineState.HASHING)
        try:
            digests = self.engine.compute_all(artifact)
        except DigestComputationError as exc:
            return self._finish(IOFailure(cause=str(exc), algorithm=exc.algorithm))

        # HASHING -> ASSEMBLING
        self._advance(PipelineState.ASSEMBLING)
        try:
            request = self.assembler.build(destination, digests, credential or "", artifact)
        except RequestValidationError as exc:
            return self._finish(ValidationFailure(reason=str(exc)))

        # ASSEMBLING -> UPLOADING: exactly one attempt
        self._advance(PipelineState.UPLOADING, request.destination)
        try:
            result = self.transport.send(request)
        except TransportError as exc:
            return self._finish(
                TransportFailure(cause=str(exc), elapsed_seconds=exc.elapsed_seconds)
            )
        except OSError as exc:
            return self._finish(IOFailure(cause=f"Cannot stream {artifact.path}: {exc}"))

        return self._finish(self.validator.evaluate(result, digests))
