"""Cancellation token passed explicitly through probe call chains."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestAborted(Exception):
    """Raised when a request is cut short by its cancellation token."""

    def __init__(self, url: str | None = None):
        self.url = url
        super().__init__(f"Request aborted: {url}" if url else "Request aborted")


class CancellationToken:
    """One-shot cancellation flag shared by every probe in a batch.

    Cancelling the token makes in-flight requests guarded by it raise
    RequestAborted, and any request started afterwards aborts immediately.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        """Cancel every operation guarded by this token.

        Args:
            reason: Optional note for logs (e.g. "client disconnected")
        """
        if not self._event.is_set():
            self.reason = reason
            self._event.set()
            logger.debug(f"Cancellation requested: {reason or 'no reason given'}")

    def raise_if_cancelled(self, url: str | None = None) -> None:
        if self.cancelled:
            raise RequestAborted(url)

    async def guard(self, awaitable: Awaitable[T], url: str | None = None) -> T:
        """Await an operation, aborting it if the token is cancelled first.

        Args:
            awaitable: Coroutine or future to run
            url: Target URL, recorded on the RequestAborted error

        Returns:
            The operation's result

        Raises:
            RequestAborted: If the token was cancelled before the operation settled
        """
        operation = asyncio.ensure_future(awaitable)
        if self.cancelled:
            operation.cancel()
            raise RequestAborted(url)

        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {operation, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            operation.cancel()
            raise
        finally:
            waiter.cancel()

        if operation not in done:
            operation.cancel()
            operation.add_done_callback(_consume_result)
            raise RequestAborted(url)

        return operation.result()


def _consume_result(task: asyncio.Future) -> None:
    # Retrieve the outcome of an abandoned request so asyncio does not warn.
    if not task.cancelled():
        task.exception()
