from .cancel import CancelToken
from .config import RemoteSettings
from .engine import JobClient
from .errors import (
    JobCancelledError,
    JobTimeoutError,
    PollError,
    RunnerError,
    SubmissionError,
    UnknownLanguageError,
)
from .types import ExecutionError, ExecutionRequest, ExecutionResult, JobState, JobStatus, JobToken

__all__ = [
    "CancelToken",
    "ExecutionError",
    "ExecutionRequest",
    "ExecutionResult",
    "JobCancelledError",
    "JobClient",
    "JobState",
    "JobStatus",
    "JobTimeoutError",
    "JobToken",
    "PollError",
    "RemoteSettings",
    "RunnerError",
    "SubmissionError",
    "UnknownLanguageError",
]
