from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

import httpx

from ..policy import PollPolicy
from .cancel import CancelToken
from .codec import encode_field
from .config import QUERY_PARAMS, RemoteSettings
from .errors import JobCancelledError, JobTimeoutError, PollError, SubmissionError
from .types import ExecutionRequest, ExecutionResult, JobStatus, JobToken, parse_status

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]
ClockFn = Callable[[], float]


class RemoteJobClient:
    """Submit code to a Judge0-compatible service and poll for the outcome.

    Each ``await_result`` call owns its own polling loop keyed by its token,
    so several jobs can be awaited concurrently on one client.

    Example:
        ```python
        async with RemoteJobClient(RemoteSettings.from_env()) as client:
            token = await client.submit(ExecutionRequest.create(language_id=71, source_code="print(1)"))
            result = await client.await_result(token)
        ```
    """

    def __init__(
        self,
        settings: RemoteSettings | None = None,
        *,
        policy: PollPolicy | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        """Initialize connection settings, polling defaults and injected timers.

        Example:
            ```python
            client = RemoteJobClient(settings, transport=httpx.MockTransport(handler))
            ```
        """
        if http_client is not None and transport is not None:
            raise ValueError("Provide either 'http_client' or 'transport', not both")
        self._settings = settings or RemoteSettings.from_env()
        self._policy = policy or PollPolicy()
        self._sleep = sleep
        self._clock = clock
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                headers=self._settings.headers(),
                timeout=httpx.Timeout(
                    self._settings.request_timeout_seconds,
                    connect=self._settings.connect_timeout_seconds,
                ),
                transport=transport,
            )
        self._client = http_client

    @property
    def settings(self) -> RemoteSettings:
        """Return the connection settings in use.

        Example:
            ```python
            url = client.settings.submissions_url
            ```
        """
        return self._settings

    @property
    def policy(self) -> PollPolicy:
        """Return the default polling policy.

        Example:
            ```python
            interval = client.policy.poll_interval_seconds
            ```
        """
        return self._policy

    async def __aenter__(self) -> "RemoteJobClient":
        """Enter an async context that closes the HTTP client on exit.

        Example:
            ```python
            async with RemoteJobClient() as client:
                ...
            ```
        """
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close the owned HTTP client.

        Example:
            ```python
            await client.__aexit__(None, None, None)
            ```
        """
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it.

        Example:
            ```python
            await client.aclose()
            ```
        """
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, request: ExecutionRequest) -> JobToken:
        """Submit one request and return the job token; never retried.

        Example:
            ```python
            token = await client.submit(ExecutionRequest.create(language_id=54, source_code=src))
            ```
        """
        body = {
            "language_id": request.language_id,
            "source_code": encode_field(request.source_code),
            "stdin": encode_field(request.stdin),
        }
        try:
            response = await self._client.post(
                self._settings.submissions_url,
                params=QUERY_PARAMS,
                json=body,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Submission rejected with HTTP %s", exc.response.status_code)
            raise SubmissionError(
                f"Submission failed with HTTP {exc.response.status_code}: {exc.response.text[:300]}",
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Submission transport error: %s", exc)
            raise SubmissionError(f"Submission failed: {exc}", cause=exc) from exc
        except ValueError as exc:
            raise SubmissionError("Submission response was not valid JSON", cause=exc) from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise SubmissionError(f"Submission response did not include a token: {data!r}")
        logger.info("Submitted job %s (language_id=%s)", token, request.language_id)
        return token

    async def fetch_status(
        self,
        token: JobToken,
        *,
        policy: PollPolicy | None = None,
        cancel: CancelToken | None = None,
        deadline: float | None = None,
    ) -> JobStatus:
        """Query a job's status once, retrying transport failures per policy.

        A retry is skipped when ``cancel`` fires during its backoff, and is
        not attempted when its backoff would end past ``deadline`` (a value
        of the client's clock).

        Example:
            ```python
            status = await client.fetch_status(token)
            ```
        """
        effective = policy or self._policy
        url = self._settings.status_url(token)
        attempt = 0
        while True:
            try:
                response = await self._client.get(url, params=QUERY_PARAMS)
                response.raise_for_status()
                data = response.json()
                break
            except (httpx.HTTPError, ValueError) as exc:
                delay = effective.retry_backoff_seconds * (2**attempt)
                out_of_time = deadline is not None and self._clock() + delay > deadline
                if attempt >= effective.poll_retries or out_of_time:
                    logger.warning("Status query for %s failed: %s", token, exc)
                    raise PollError(
                        f"Status query for job {token} failed: {exc}",
                        token=token,
                        cause=exc,
                    ) from exc
                attempt += 1
                logger.warning(
                    "Status query for %s failed (%s); retry %d/%d in %.2fs",
                    token,
                    exc,
                    attempt,
                    effective.poll_retries,
                    delay,
                )
                await self._pause(delay, cancel)
                if cancel is not None and cancel.cancelled:
                    logger.info("Skipped status retry for cancelled job %s", token)
                    raise JobCancelledError(token=token) from exc

        if not isinstance(data, dict):
            raise PollError(f"Status response for job {token} was not an object", token=token)
        try:
            return parse_status(token, data)
        except (ValueError, TypeError) as exc:
            raise PollError(
                f"Status response for job {token} could not be decoded: {exc}",
                token=token,
                cause=exc,
            ) from exc

    async def await_result(
        self,
        token: JobToken,
        *,
        policy: PollPolicy | None = None,
        cancel: CancelToken | None = None,
    ) -> ExecutionResult:
        """Poll until the job is terminal and return its decoded result.

        Remote compile or runtime failures come back as data on
        ``ExecutionResult.error``. Transport failures raise ``PollError``,
        exhausted bounds raise ``JobTimeoutError`` and cancellation raises
        ``JobCancelledError``.

        Example:
            ```python
            result = await client.await_result(token, policy=PollPolicy(timeout_seconds=60))
            ```
        """
        effective = policy or self._policy
        started = self._clock()
        deadline = None if effective.timeout_seconds is None else started + effective.timeout_seconds
        attempts = 0
        while True:
            if cancel is not None and cancel.cancelled:
                logger.info("Stopped polling cancelled job %s", token)
                raise JobCancelledError(token=token)

            status = await self.fetch_status(
                token, policy=effective, cancel=cancel, deadline=deadline
            )
            attempts += 1
            if cancel is not None and cancel.cancelled:
                logger.info("Discarded status for cancelled job %s", token)
                raise JobCancelledError(token=token)

            if status.state.is_terminal and status.result is not None:
                logger.info(
                    "Job %s terminal after %d status queries: %s",
                    token,
                    attempts,
                    status.description or status.state.value,
                )
                return status.result

            logger.debug("Job %s is %s (attempt %d)", token, status.state.value, attempts)
            if effective.max_attempts is not None and attempts >= effective.max_attempts:
                raise JobTimeoutError(token=token, attempts=attempts)

            delay = effective.interval_for(attempts)
            if deadline is not None and deadline - self._clock() < delay:
                raise JobTimeoutError(
                    token=token,
                    attempts=attempts,
                    reason=f"deadline of {effective.timeout_seconds}s exceeded",
                )
            await self._pause(delay, cancel)

    async def run(
        self,
        request: ExecutionRequest,
        *,
        policy: PollPolicy | None = None,
        cancel: CancelToken | None = None,
    ) -> ExecutionResult:
        """Submit a request and await its terminal result.

        Example:
            ```python
            result = await client.run(ExecutionRequest.create(language_id=71, source_code="print(1)"))
            ```
        """
        token = await self.submit(request)
        return await self.await_result(token, policy=policy, cancel=cancel)

    async def _pause(self, delay: float, cancel: CancelToken | None) -> None:
        """Suspend between status queries, waking early on cancellation.

        Example:
            ```python
            await client._pause(2.0, cancel)
            ```
        """
        if cancel is None:
            await self._sleep(delay)
            return
        sleeper = asyncio.ensure_future(self._sleep(delay))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (sleeper, waiter):
                if not pending.done():
                    pending.cancel()
            await asyncio.gather(sleeper, waiter, return_exceptions=True)
        if sleeper.done() and not sleeper.cancelled() and sleeper.exception() is not None:
            raise sleeper.exception()  # type: ignore[misc]
