"""Cancellable execution context.

Operations that talk to Manila or wait between polls take a
``CancellableContext``. It bounds the whole operation with an optional
deadline and can be cancelled from another thread; every backend call and
every backoff sleep checks it.
"""

import threading
import time
from typing import Optional

from oslo_log import log as logging

from .exceptions import ContextCancelled, ContextDeadlineExceeded

LOG = logging.getLogger(__name__)


class CancellableContext:
    """Deadline and cancellation signal shared by one logical operation.

    Args:
        timeout: Seconds until the deadline, or None for no deadline
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout

    def cancel(self) -> None:
        """Cancel the context and wake up any pending sleep."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline (never negative), None if unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline.

        Raises:
            ContextCancelled: cancel() was called
            ContextDeadlineExceeded: Deadline passed
        """
        if self._cancelled.is_set():
            raise ContextCancelled()
        if self.expired():
            raise ContextDeadlineExceeded(timeout=self.timeout)

    def request_timeout(self, timeout: float) -> float:
        """Clamp a per-request timeout to the time left on the context.

        Raises:
            ContextCancelled: The context is already done
        """
        self.check()
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless the context ends first.

        Raises:
            ContextCancelled: Cancelled while sleeping
            ContextDeadlineExceeded: Deadline reached before the sleep finished
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            # Wait out what is left, then report the deadline
            self._cancelled.wait(remaining)
            self.check()
            raise ContextDeadlineExceeded(timeout=self.timeout)
        if self._cancelled.wait(seconds):
            LOG.debug("Sleep interrupted by context cancellation")
        self.check()


def background() -> CancellableContext:
    """Return a context with no deadline that is never cancelled implicitly."""
    return CancellableContext()
