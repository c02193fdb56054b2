from __future__ import annotations


class RunnerError(Exception):
    """Base class for client-side failures while running remote jobs.

    Example:
        ```python
        try:
            await client.run(request)
        except RunnerError as exc:
            print(exc)
        ```
    """


class SubmissionError(RunnerError):
    """Job creation failed; no token was allocated.

    Example:
        ```python
        raise SubmissionError("HTTP 503", cause=exc)
        ```
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        """Store the message and the underlying transport failure.

        Example:
            ```python
            err = SubmissionError("missing token")
            ```
        """
        super().__init__(message)
        self.cause = cause


class PollError(RunnerError):
    """A status query for a known token failed at the transport level.

    Example:
        ```python
        raise PollError("timed out", token="abc", cause=exc)
        ```
    """

    def __init__(
        self,
        message: str,
        *,
        token: str,
        cause: BaseException | None = None,
    ) -> None:
        """Store the message, the token being polled and the underlying failure.

        Example:
            ```python
            err = PollError("HTTP 500", token="abc")
            ```
        """
        super().__init__(message)
        self.token = token
        self.cause = cause


class JobTimeoutError(RunnerError):
    """Polling gave up before the job reached a terminal status.

    Example:
        ```python
        raise JobTimeoutError(token="abc", attempts=10)
        ```
    """

    def __init__(self, *, token: str, attempts: int, reason: str = "attempt limit reached") -> None:
        """Record how many status queries were issued before giving up.

        Example:
            ```python
            err = JobTimeoutError(token="abc", attempts=3, reason="deadline exceeded")
            ```
        """
        super().__init__(f"Job {token} not finished after {attempts} status queries ({reason})")
        self.token = token
        self.attempts = attempts
        self.reason = reason


class JobCancelledError(RunnerError):
    """The caller cancelled interest in a job before it finished.

    Example:
        ```python
        raise JobCancelledError(token="abc")
        ```
    """

    def __init__(self, *, token: str | None) -> None:
        """Record the cancelled token.

        Example:
            ```python
            err = JobCancelledError(token="abc")
            ```
        """
        super().__init__(f"Job {token} was cancelled")
        self.token = token


class UnknownLanguageError(ValueError):
    """The requested language is not in the static language table.

    Example:
        ```python
        raise UnknownLanguageError("brainfork")
        ```
    """

    def __init__(self, language: object) -> None:
        """Record the unresolved language key or id.

        Example:
            ```python
            err = UnknownLanguageError(999)
            ```
        """
        super().__init__(f"Unknown language: {language!r}")
        self.language = language
