from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .codec import decode_field, to_bytes

JobToken = str

STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3
STATUS_WRONG_ANSWER = 4

_FINISHED_STATUS_IDS = frozenset({STATUS_ACCEPTED, STATUS_WRONG_ANSWER})
_FAILURE_KINDS: dict[int, str] = {
    5: "time_limit",
    6: "compilation",
    7: "runtime",
    8: "runtime",
    9: "runtime",
    10: "runtime",
    11: "runtime",
    12: "runtime",
    13: "internal",
    14: "exec_format",
}
_ENCODED_FIELDS = ("stdout", "stderr", "compile_output", "message")


class JobState(str, Enum):
    """Lifecycle state of one remote job.

    Example:
        ```python
        assert JobState.FINISHED.is_terminal
        ```
    """

    QUEUED = "queued"
    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Return whether no further state change can follow.

        Example:
            ```python
            JobState.RUNNING.is_terminal  # False
            ```
        """
        return self in {JobState.FINISHED, JobState.FAILED}


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """Write-once request describing one remote run.

    Example:
        ```python
        req = ExecutionRequest(language_id=71, source_code=b"print(1)")
        ```
    """

    language_id: int
    source_code: bytes
    stdin: bytes = b""

    def __post_init__(self) -> None:
        """Reject requests that cannot be submitted.

        Example:
            ```python
            ExecutionRequest(language_id=71, source_code=b"")
            ```
        """
        if self.source_code is None:
            raise ValueError("source_code must not be None")
        if isinstance(self.language_id, bool) or not isinstance(self.language_id, int):
            raise ValueError("language_id must be an integer")

    @classmethod
    def create(
        cls,
        *,
        language_id: int,
        source_code: str | bytes,
        stdin: str | bytes = b"",
    ) -> "ExecutionRequest":
        """Build a request from text or bytes, encoding text as UTF-8.

        Example:
            ```python
            req = ExecutionRequest.create(language_id=71, source_code="print(input())", stdin="hi")
            ```
        """
        if source_code is None:
            raise ValueError("source_code must not be None")
        return cls(
            language_id=language_id,
            source_code=to_bytes(source_code),
            stdin=to_bytes(stdin or b""),
        )


@dataclass(frozen=True, slots=True)
class ExecutionError:
    """Failure reported by the remote service for a completed job.

    Example:
        ```python
        err = ExecutionError(kind="compilation", status_id=6, description="Compilation Error")
        ```
    """

    kind: str
    status_id: int | None
    description: str
    details: str | None = None


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Decoded terminal outcome of a remote job.

    Example:
        ```python
        result = ExecutionResult(token="abc", status_id=3, status_description="Accepted", stdout=b"1\\n")
        ```
    """

    token: JobToken
    status_id: int | None
    status_description: str
    stdout: bytes | None = None
    stderr: bytes | None = None
    compile_output: bytes | None = None
    message: bytes | None = None
    exit_code: int | None = None
    exit_signal: int | None = None
    time_seconds: float | None = None
    wall_time_seconds: float | None = None
    memory_kb: int | None = None
    error: ExecutionError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the job finished without a reported failure.

        Example:
            ```python
            if result.ok:
                print("done")
            ```
        """
        return self.error is None


@dataclass(frozen=True, slots=True)
class JobStatus:
    """One observed status for a job token.

    Example:
        ```python
        status = JobStatus(token="abc", state=JobState.QUEUED, status_id=1, description="In Queue")
        ```
    """

    token: JobToken
    state: JobState
    status_id: int | None
    description: str
    result: ExecutionResult | None = None


def state_for_status_id(status_id: int | None) -> JobState:
    """Map a service status code onto the job lifecycle.

    Unknown or missing codes are treated as terminal failures.

    Example:
        ```python
        state = state_for_status_id(2)  # JobState.RUNNING
        ```
    """
    if status_id == STATUS_IN_QUEUE:
        return JobState.QUEUED
    if status_id == STATUS_PROCESSING:
        return JobState.RUNNING
    if status_id in _FINISHED_STATUS_IDS:
        return JobState.FINISHED
    return JobState.FAILED


def _optional_float(value: Any) -> float | None:
    """Parse an optional numeric metric that may arrive as a string.

    Example:
        ```python
        _optional_float("0.012")  # 0.012
        ```
    """
    if value is None or value == "":
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    """Parse an optional integer metric.

    Example:
        ```python
        _optional_int(3200)  # 3200
        ```
    """
    if value is None or value == "":
        return None
    return int(value)


def _status_id(payload: Mapping[str, Any]) -> tuple[int | None, str]:
    """Extract the status code and description from a status payload.

    Example:
        ```python
        _status_id({"status": {"id": 3, "description": "Accepted"}})
        ```
    """
    status = payload.get("status")
    if isinstance(status, Mapping):
        raw_id = status.get("id")
        description = str(status.get("description") or "")
    else:
        raw_id = payload.get("status_id")
        description = str(payload.get("status_description") or "")
    try:
        status_id = int(raw_id) if raw_id is not None else None
    except (TypeError, ValueError):
        status_id = None
    return status_id, description


def _build_error(
    state: JobState,
    status_id: int | None,
    description: str,
    decoded: Mapping[str, bytes | None],
) -> ExecutionError | None:
    """Build the failure record for a terminal status, if any.

    Example:
        ```python
        err = _build_error(JobState.FAILED, 6, "Compilation Error", {"compile_output": b"..."})
        ```
    """
    if state is not JobState.FAILED:
        return None
    kind = _FAILURE_KINDS.get(status_id, "unknown") if status_id is not None else "unknown"
    detail_bytes = decoded.get("compile_output") or decoded.get("stderr") or decoded.get("message")
    details = detail_bytes.decode("utf-8", errors="replace") if detail_bytes else None
    if kind == "unknown":
        details = f"Unrecognized status code: {status_id!r}" + (f"\n{details}" if details else "")
    return ExecutionError(
        kind=kind,
        status_id=status_id,
        description=description or "Unknown status",
        details=details,
    )


def parse_status(token: JobToken, payload: Mapping[str, Any]) -> JobStatus:
    """Normalize a raw status payload into a JobStatus.

    Output fields are only decoded once the job is terminal.

    Example:
        ```python
        status = parse_status("abc", {"status": {"id": 1, "description": "In Queue"}})
        ```
    """
    status_id, description = _status_id(payload)
    state = state_for_status_id(status_id)
    if not state.is_terminal:
        return JobStatus(token=token, state=state, status_id=status_id, description=description)

    decoded = {name: decode_field(payload.get(name)) for name in _ENCODED_FIELDS}
    result = ExecutionResult(
        token=token,
        status_id=status_id,
        status_description=description,
        stdout=decoded["stdout"],
        stderr=decoded["stderr"],
        compile_output=decoded["compile_output"],
        message=decoded["message"],
        exit_code=_optional_int(payload.get("exit_code")),
        exit_signal=_optional_int(payload.get("exit_signal")),
        time_seconds=_optional_float(payload.get("time")),
        wall_time_seconds=_optional_float(payload.get("wall_time")),
        memory_kb=_optional_int(payload.get("memory")),
        error=_build_error(state, status_id, description, decoded),
    )
    return JobStatus(
        token=token,
        state=state,
        status_id=status_id,
        description=description,
        result=result,
    )
