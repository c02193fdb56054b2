from __future__ import annotations

import asyncio


class CancelToken:
    """Caller-visible handle that stops further polling for a job.

    Once cancelled, the polling loop issues no more status queries and
    delivers no result for the job.

    Example:
        ```python
        cancel = CancelToken()
        task = asyncio.create_task(client.await_result(token, cancel=cancel))
        cancel.cancel()
        ```
    """

    def __init__(self) -> None:
        """Create an un-cancelled token.

        Example:
            ```python
            cancel = CancelToken()
            ```
        """
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Return whether cancellation was requested.

        Example:
            ```python
            if cancel.cancelled:
                return
            ```
        """
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation; idempotent.

        Example:
            ```python
            cancel.cancel()
            ```
        """
        self._event.set()

    async def wait(self) -> None:
        """Suspend until cancellation is requested.

        Example:
            ```python
            await cancel.wait()
            ```
        """
        await self._event.wait()
