import base64

import pytest

from remote_code_runner import ExecutionRequest, JobState
from remote_code_runner.execution.codec import decode_field, decode_text, encode_field
from remote_code_runner.execution.types import parse_status, state_for_status_id


@pytest.mark.parametrize(
    "raw",
    [b"", "int main() { return 0; }".encode(), "¿qué tal? 你好 🚀".encode("utf-8"), bytes(range(256))],
)
def test_field_encoding_is_binary_safe(raw: bytes) -> None:
    assert decode_field(encode_field(raw)) == raw


def test_text_fields_are_encoded_as_utf8() -> None:
    assert base64.b64decode(encode_field("ñ")) == "ñ".encode("utf-8")


def test_decode_field_accepts_line_wrapped_base64() -> None:
    wrapped = base64.encodebytes(b"x" * 100).decode("ascii")
    assert "\n" in wrapped
    assert decode_field(wrapped) == b"x" * 100


def test_absent_fields_stay_absent() -> None:
    assert decode_field(None) is None
    assert decode_text(None) == ""


def test_decode_text_replaces_invalid_utf8() -> None:
    assert decode_text(b"ok\xff") == "ok\ufffd"


def test_encode_field_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        encode_field(12)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("status_id", "state"),
    [
        (1, JobState.QUEUED),
        (2, JobState.RUNNING),
        (3, JobState.FINISHED),
        (4, JobState.FINISHED),
        (5, JobState.FAILED),
        (11, JobState.FAILED),
        (42, JobState.FAILED),
        (None, JobState.FAILED),
    ],
)
def test_status_codes_map_onto_lifecycle(status_id, state) -> None:
    assert state_for_status_id(status_id) is state


def test_non_terminal_status_carries_no_result() -> None:
    status = parse_status("t", {"status": {"id": 2, "description": "Processing"}, "stdout": None})
    assert status.state is JobState.RUNNING
    assert not status.state.is_terminal
    assert status.result is None


def test_terminal_status_decodes_output_and_metrics() -> None:
    status = parse_status(
        "t",
        {
            "status": {"id": 11, "description": "Runtime Error (NZEC)"},
            "stdout": base64.b64encode(b"partial").decode(),
            "stderr": base64.b64encode(b"Traceback").decode(),
            "time": "0.05",
            "wall_time": "0.2",
            "memory": 4096,
            "exit_code": 1,
        },
    )
    result = status.result
    assert result is not None
    assert result.stdout == b"partial"
    assert result.exit_code == 1
    assert result.wall_time_seconds == 0.2
    assert result.error is not None
    assert result.error.kind == "runtime"
    assert result.error.details == "Traceback"


def test_flat_status_fields_are_understood() -> None:
    status = parse_status("t", {"status_id": 5, "status_description": "Time Limit Exceeded"})
    assert status.result is not None
    assert status.result.error is not None
    assert status.result.error.kind == "time_limit"


def test_missing_status_is_unknown_failure() -> None:
    status = parse_status("t", {})
    assert status.state is JobState.FAILED
    assert status.result is not None
    assert status.result.error is not None
    assert status.result.error.kind == "unknown"
    assert status.result.error.status_id is None


def test_request_is_immutable_and_requires_source() -> None:
    request = ExecutionRequest.create(language_id=71, source_code="")
    assert request.source_code == b""
    with pytest.raises(AttributeError):
        request.language_id = 72  # type: ignore[misc]
    with pytest.raises(ValueError, match="source_code"):
        ExecutionRequest.create(language_id=71, source_code=None)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="language_id"):
        ExecutionRequest(language_id="71", source_code=b"")  # type: ignore[arg-type]
