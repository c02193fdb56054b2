from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .cancel import CancelToken
from .types import ExecutionRequest, ExecutionResult, JobStatus, JobToken

if TYPE_CHECKING:
    from ..policy import PollPolicy


class JobClient(Protocol):
    async def submit(self, request: ExecutionRequest) -> JobToken:
        """Submit one request and return the job token issued by the service.

        Example:
            ```python
            token = await client.submit(ExecutionRequest(language_id=71, source_code=b"print(1)"))
            ```
        """
        ...

    async def fetch_status(
        self,
        token: JobToken,
        *,
        policy: PollPolicy | None = None,
        cancel: CancelToken | None = None,
        deadline: float | None = None,
    ) -> JobStatus:
        """Query the current status of a job once.

        Example:
            ```python
            status = await client.fetch_status(token)
            ```
        """
        ...

    async def await_result(
        self,
        token: JobToken,
        *,
        policy: PollPolicy | None = None,
        cancel: CancelToken | None = None,
    ) -> ExecutionResult:
        """Poll until the job is terminal and return its decoded result.

        Example:
            ```python
            result = await client.await_result(token, policy=PollPolicy(max_attempts=10))
            ```
        """
        ...
