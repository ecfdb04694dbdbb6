"""hashput data models — all Pydantic v2, all frozen (immutable)."""

from hashput.models.artifacts import (
    CHECKSUM_HEADERS,
    DIGEST_ALGORITHMS,
    ArtifactValidationError,
    DigestSet,
    SourceArtifact,
)
from hashput.models.outcomes import (
    EXIT_CODES,
    OUTCOME_TYPE_MAP,
    IntegrityMismatch,
    IOFailure,
    OutcomeBase,
    OutcomeKind,
    Success,
    TransportFailure,
    UploadOutcome,
    ValidationFailure,
)
from hashput.models.pipeline import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    PipelineState,
    StateTransition,
)
from hashput.models.transfer import UploadRequest, UploadResult

__all__ = [
    # artifacts
    "DIGEST_ALGORITHMS",
    "CHECKSUM_HEADERS",
    "ArtifactValidationError",
    "SourceArtifact",
    "DigestSet",
    # transfer
    "UploadRequest",
    "UploadResult",
    # outcomes
    "OutcomeKind",
    "OutcomeBase",
    "Success",
    "IntegrityMismatch",
    "TransportFailure",
    "ValidationFailure",
    "IOFailure",
    "UploadOutcome",
    "OUTCOME_TYPE_MAP",
    "EXIT_CODES",
    # pipeline
    "PipelineState",
    "StateTransition",
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
]
