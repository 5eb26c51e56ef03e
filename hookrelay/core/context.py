import asyncio
import time
from typing import Optional

from hookrelay.core.errors import DeadlineExceededError, RequestCancelledError


class RequestContext:
    """Deadline and cancellation state for a single webhook request.

    Passed unchanged into every sink call so adapters can bound their own
    I/O with ``remaining()``.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = asyncio.Event()

    @classmethod
    def background(cls) -> "RequestContext":
        """Context with no deadline"""
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def raise_if_done(self) -> None:
        if self.cancelled:
            raise RequestCancelledError()
        if self.expired():
            raise DeadlineExceededError()

    async def wait_cancelled(self) -> None:
        await self._cancelled.wait()
