"""Tests for all Pydantic data models — validation, immutability, defaults."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

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
    OutcomeKind,
    Success,
    TransportFailure,
    UploadOutcome,
    ValidationFailure,
)
from hashput.models.pipeline import TERMINAL_STATES, VALID_TRANSITIONS, PipelineState
from hashput.models.transfer import UploadResult

_EMPTY = DigestSet(
    md5="d41d8cd98f00b204e9800998ecf8427e",
    sha1="da39a3ee5e6b4b0d3255bfef95601890afd80709",
    sha256="e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
)


class TestSourceArtifact:
    def test_resolve_regular_file(self, ten_byte_file: Path):
        artifact = SourceArtifact.resolve(ten_byte_file)
        assert artifact.size_bytes == 10
        assert artifact.display_name == "app.bin"
        assert artifact.path.is_absolute()

    def test_resolve_custom_display_name(self, ten_byte_file: Path):
        artifact = SourceArtifact.resolve(ten_byte_file, display_name="renamed.bin")
        assert artifact.display_name == "renamed.bin"

    def test_resolve_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ArtifactValidationError, match="does not exist"):
            SourceArtifact.resolve(tmp_path / "nope.bin")

    def test_resolve_directory_raises(self, tmp_path: Path):
        with pytest.raises(ArtifactValidationError, match="directory"):
            SourceArtifact.resolve(tmp_path)

    def test_frozen(self, ten_byte_artifact: SourceArtifact):
        with pytest.raises(ValidationError):
            ten_byte_artifact.size_bytes = 99


class TestDigestSet:
    def test_as_mapping_order(self):
        assert list(_EMPTY.as_mapping()) == list(DIGEST_ALGORITHMS)

    def test_checksum_headers(self):
        headers = _EMPTY.checksum_headers()
        assert set(headers) == {"X-Checksum-Md5", "X-Checksum-Sha1", "X-Checksum-Sha256"}
        assert headers["X-Checksum-Sha256"] == _EMPTY.sha256
        assert set(CHECKSUM_HEADERS.values()) == set(headers)

    def test_missing_digest_rejected(self):
        with pytest.raises(ValidationError):
            DigestSet(md5=_EMPTY.md5, sha1=_EMPTY.sha1)  # type: ignore[call-arg]

    def test_empty_digest_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            DigestSet(md5=_EMPTY.md5, sha1=_EMPTY.sha1, sha256="")

    def test_uppercase_digest_rejected(self):
        with pytest.raises(ValidationError, match="lowercase hex"):
            DigestSet(md5=_EMPTY.md5.upper(), sha1=_EMPTY.sha1, sha256=_EMPTY.sha256)

    def test_wrong_length_rejected(self):
        with pytest.raises(ValidationError):
            DigestSet(md5=_EMPTY.md5, sha1=_EMPTY.md5, sha256=_EMPTY.sha256)


class TestOutcomes:
    def test_exit_codes(self):
        result = UploadResult(status_code=201, elapsed_seconds=0.0)
        assert Success(result=result).exit_code == 0
        assert ValidationFailure(reason="x").exit_code == 2
        assert IOFailure(cause="x").exit_code == 3
        assert TransportFailure(cause="x").exit_code == 4
        assert IntegrityMismatch(expected="a", observed="b", result=result).exit_code == 5

    def test_only_success_is_ok(self):
        result = UploadResult(status_code=201, elapsed_seconds=0.0)
        assert Success(result=result).ok is True
        assert TransportFailure(cause="x").ok is False
        assert IntegrityMismatch(expected="a", observed="b", result=result).ok is False

    def test_exit_codes_distinct(self):
        failures = [code for kind, code in EXIT_CODES.items() if kind != OutcomeKind.SUCCESS]
        assert len(set(failures)) == len(failures)
        assert 0 not in failures

    def test_type_map_covers_all_kinds(self):
        assert set(OUTCOME_TYPE_MAP) == set(OutcomeKind)

    def test_discriminated_union_round_trip(self):
        adapter = TypeAdapter(UploadOutcome)
        original = TransportFailure(cause="HTTP 500", status_code=500, body="boom")
        restored = adapter.validate_json(original.model_dump_json())
        assert isinstance(restored, TransportFailure)
        assert restored.status_code == 500


class TestPipelineStates:
    def test_terminal_states_have_no_transitions(self):
        for state in TERMINAL_STATES:
            assert VALID_TRANSITIONS[state] == set()

    def test_every_state_has_transition_entry(self):
        assert set(VALID_TRANSITIONS) == set(PipelineState)

    def test_terminal_states_match_outcome_kinds(self):
        assert {s.value for s in TERMINAL_STATES} == {k.value for k in OutcomeKind}

    def test_hashing_precedes_assembling(self):
        assert PipelineState.ASSEMBLING in VALID_TRANSITIONS[PipelineState.HASHING]
        assert PipelineState.UPLOADING not in VALID_TRANSITIONS[PipelineState.HASHING]
