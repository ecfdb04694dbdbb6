"""Upload pipeline state model — strictly forward, no loops."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PipelineState(str, Enum):
    """States of a single upload run."""

    IDLE = "idle"
    RESOLVED = "resolved"
    HASHING = "hashing"
    ASSEMBLING = "assembling"
    UPLOADING = "uploading"
    SUCCESS = "success"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    TRANSPORT_FAILURE = "transport_failure"
    VALIDATION_FAILURE = "validation_failure"
    IO_FAILURE = "io_failure"


TERMINAL_STATES: frozenset[PipelineState] = frozenset({
    PipelineState.SUCCESS,
    PipelineState.INTEGRITY_MISMATCH,
    PipelineState.TRANSPORT_FAILURE,
    PipelineState.VALIDATION_FAILURE,
    PipelineState.IO_FAILURE,
})

# Valid state transitions, enforced by UploadPipeline.
# Terminal states have no outgoing transitions; there is no retry edge.
VALID_TRANSITIONS: dict[PipelineState, set[PipelineState]] = {
    PipelineState.IDLE: {PipelineState.RESOLVED, PipelineState.VALIDATION_FAILURE},
    PipelineState.RESOLVED: {PipelineState.HASHING, PipelineState.VALIDATION_FAILURE},
    PipelineState.HASHING: {PipelineState.ASSEMBLING, PipelineState.IO_FAILURE},
    PipelineState.ASSEMBLING: {PipelineState.UPLOADING, PipelineState.VALIDATION_FAILURE},
    PipelineState.UPLOADING: {
        PipelineState.SUCCESS,
        PipelineState.INTEGRITY_MISMATCH,
        PipelineState.TRANSPORT_FAILURE,
        PipelineState.IO_FAILURE,
    },
    **{state: set() for state in TERMINAL_STATES},
}


class StateTransition(BaseModel):
    """Records a single state transition for the run history."""

    model_config = ConfigDict(frozen=True)

    from_state: PipelineState
    to_state: PipelineState
    detail: str | None = None
