from .execution import (
    CancelToken,
    ExecutionError,
    ExecutionRequest,
    ExecutionResult,
    JobCancelledError,
    JobState,
    JobStatus,
    JobTimeoutError,
    PollError,
    RemoteSettings,
    RunnerError,
    SubmissionError,
    UnknownLanguageError,
)
from .execution.remote_engine import RemoteJobClient
from .languages import LANGUAGES, Language, get_language, language_for_path
from .policy import PollPolicy
from .runner import build_request, run_code
from .session import RunSession

__all__ = [
    "CancelToken",
    "ExecutionError",
    "ExecutionRequest",
    "ExecutionResult",
    "JobCancelledError",
    "JobState",
    "JobStatus",
    "JobTimeoutError",
    "LANGUAGES",
    "Language",
    "PollError",
    "PollPolicy",
    "RemoteJobClient",
    "RemoteSettings",
    "RunSession",
    "RunnerError",
    "SubmissionError",
    "UnknownLanguageError",
    "build_request",
    "get_language",
    "language_for_path",
    "run_code",
]
