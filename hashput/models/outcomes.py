"""Terminal upload outcomes.

Exactly one outcome is produced per pipeline run.  Outcomes are values, not
exceptions: the CLI renders them and maps them to a process exit code.

Exit codes
----------
- 0 : SUCCESS
- 2 : VALIDATION_FAILURE  (bad input, rejected before any I/O)
- 3 : IO_FAILURE          (file could not be read in full)
- 4 : TRANSPORT_FAILURE   (network error or non-201 status)
- 5 : INTEGRITY_MISMATCH  (server checksum disagrees with the local one)
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from hashput.models.transfer import UploadResult


class OutcomeKind(str, Enum):
    """The five terminal outcome kinds."""

    SUCCESS = "success"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    TRANSPORT_FAILURE = "transport_failure"
    VALIDATION_FAILURE = "validation_failure"
    IO_FAILURE = "io_failure"


EXIT_CODES: dict[OutcomeKind, int] = {
    OutcomeKind.SUCCESS: 0,
    OutcomeKind.VALIDATION_FAILURE: 2,
    OutcomeKind.IO_FAILURE: 3,
    OutcomeKind.TRANSPORT_FAILURE: 4,
    OutcomeKind.INTEGRITY_MISMATCH: 5,
}


class OutcomeBase(BaseModel):
    """Fields and helpers shared by every outcome."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.kind]


class Success(OutcomeBase):
    """Server answered 201 and no checksum disagreement was observed."""

    kind: Literal[OutcomeKind.SUCCESS] = OutcomeKind.SUCCESS
    result: UploadResult


class IntegrityMismatch(OutcomeBase):
    """Server accepted the upload but reports different content.

    Indicates corruption in transit, not a connectivity problem.
    """

    kind: Literal[OutcomeKind.INTEGRITY_MISMATCH] = OutcomeKind.INTEGRITY_MISMATCH
    expected: str  # local SHA-256
    observed: str  # server-reported SHA-256
    result: UploadResult


class TransportFailure(OutcomeBase):
    """Network-level error, or the server answered with a non-201 status."""

    kind: Literal[OutcomeKind.TRANSPORT_FAILURE] = OutcomeKind.TRANSPORT_FAILURE
    cause: str
    status_code: int | None = None
    body: str | None = None
    elapsed_seconds: float | None = None


class ValidationFailure(OutcomeBase):
    """Input rejected before any file content was read or sent."""

    kind: Literal[OutcomeKind.VALIDATION_FAILURE] = OutcomeKind.VALIDATION_FAILURE
    reason: str


class IOFailure(OutcomeBase):
    """The artifact could not be read in full."""

    kind: Literal[OutcomeKind.IO_FAILURE] = OutcomeKind.IO_FAILURE
    cause: str
    algorithm: str | None = None  # digest worker that failed, if any


UploadOutcome = Annotated[
    Union[Success, IntegrityMismatch, TransportFailure, ValidationFailure, IOFailure],
    Field(discriminator="kind"),
]

# Registry for deserialization by kind
OUTCOME_TYPE_MAP: dict[OutcomeKind, type[OutcomeBase]] = {
    OutcomeKind.SUCCESS: Success,
    OutcomeKind.INTEGRITY_MISMATCH: IntegrityMismatch,
    OutcomeKind.TRANSPORT_FAILURE: TransportFailure,
    OutcomeKind.VALIDATION_FAILURE: ValidationFailure,
    OutcomeKind.IO_FAILURE: IOFailure,
}
