from __future__ import annotations

import logging
from typing import Callable

from .execution.cancel import CancelToken
from .execution.engine import JobClient
from .execution.errors import JobCancelledError, RunnerError
from .execution.types import ExecutionRequest, ExecutionResult, JobToken
from .policy import PollPolicy

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[ExecutionResult], None]
ErrorCallback = Callable[[RunnerError], None]


class RunSession:
    """Caller-owned job state with a single active run at a time.

    Starting a run supersedes the previous one: its polling is cancelled and
    anything it produces afterwards is dropped instead of overwriting the
    newer run's output.

    Example:
        ```python
        session = RunSession(client)
        await session.run(request, on_success=show_output, on_error=show_error)
        ```
    """

    def __init__(self, client: JobClient, *, policy: PollPolicy | None = None) -> None:
        """Bind the session to a job client and optional polling policy.

        Example:
            ```python
            session = RunSession(client, policy=PollPolicy(max_attempts=30))
            ```
        """
        self._client = client
        self._policy = policy
        self._generation = 0
        self._cancel: CancelToken | None = None
        self.processing = False
        self.active_token: JobToken | None = None
        self.output: ExecutionResult | None = None
        self.last_error: RunnerError | None = None

    @property
    def generation(self) -> int:
        """Return the identity of the most recent run.

        Example:
            ```python
            current = session.generation
            ```
        """
        return self._generation

    def _is_current(self, generation: int, cancel: CancelToken) -> bool:
        """Return whether a run may still publish state.

        Example:
            ```python
            if session._is_current(gen, cancel):
                ...
            ```
        """
        return generation == self._generation and not cancel.cancelled

    def cancel(self) -> None:
        """Cancel the active run; no callback fires for it afterwards.

        Example:
            ```python
            session.cancel()
            ```
        """
        self._generation += 1
        if self._cancel is not None:
            self._cancel.cancel()
            self._cancel = None
        self.processing = False
        self.active_token = None

    async def run(
        self,
        request: ExecutionRequest,
        *,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> ExecutionResult | None:
        """Run a request as the active job and publish its outcome.

        Returns the result, or ``None`` when the run failed, was cancelled
        or was superseded by a newer run.

        Example:
            ```python
            result = await session.run(request)
            ```
        """
        self.cancel()
        generation = self._generation
        cancel = CancelToken()
        self._cancel = cancel
        self.processing = True
        self.last_error = None

        try:
            token = await self._client.submit(request)
            if not self._is_current(generation, cancel):
                logger.info("Run superseded before polling job %s; dropping it", token)
                return None
            self.active_token = token
            result = await self._client.await_result(token, policy=self._policy, cancel=cancel)
        except JobCancelledError as exc:
            logger.debug("Run for job %s cancelled", exc.token)
            return None
        except RunnerError as exc:
            if not self._is_current(generation, cancel):
                logger.warning("Dropped error from superseded run: %s", exc)
                return None
            self.processing = False
            self.last_error = exc
            if on_error is not None:
                on_error(exc)
            return None
        finally:
            if generation == self._generation:
                self.processing = False

        if not self._is_current(generation, cancel):
            logger.warning("Dropped result for superseded job %s", result.token)
            return None
        self.output = result
        if on_success is not None:
            on_success(result)
        return result
