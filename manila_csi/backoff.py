"""Bounded exponential backoff for polling a condition."""

from dataclasses import dataclass
from typing import Callable, Iterator

from oslo_log import log as logging

from .context import CancellableContext
from .exceptions import WaitTimeout

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Backoff:
    """Backoff policy.

    Attributes:
        duration: Delay in seconds after the first unsuccessful attempt
        factor: Multiplier applied to the delay after every attempt
        steps: Maximum number of times the condition is evaluated
    """

    duration: float
    factor: float = 1.0
    steps: int = 1

    def delays(self) -> Iterator[float]:
        """Yield the ``steps - 1`` delays slept between attempts."""
        delay = self.duration
        for _ in range(max(self.steps - 1, 0)):
            yield delay
            delay *= self.factor

    def total_delay(self, attempts: int) -> float:
        """Seconds slept in total when the condition is evaluated ``attempts`` times."""
        return sum(d for _, d in zip(range(attempts - 1), self.delays()))


def exponential_backoff(
    context: CancellableContext,
    backoff: Backoff,
    condition: Callable[[], bool],
) -> int:
    """Evaluate ``condition`` until it returns True or attempts run out.

    The condition runs immediately, then again after each delay from
    ``backoff.delays()``. No sleep follows the last attempt. Exceptions
    raised by the condition end the wait and propagate unchanged.

    Args:
        context: Execution context; checked before every attempt and
            honored while sleeping
        backoff: Backoff policy
        condition: Callable returning True when done, False to keep waiting

    Returns:
        Number of attempts made, including the successful one

    Raises:
        WaitTimeout: Condition still False after ``backoff.steps`` attempts
        ContextCancelled: Context cancelled or deadline exceeded
    """
    delays = backoff.delays()
    for attempt in range(1, backoff.steps + 1):
        context.check()
        if condition():
            LOG.debug("Condition met after %d attempt(s)", attempt)
            return attempt
        if attempt == backoff.steps:
            break
        delay = next(delays)
        LOG.debug(
            "Condition not met (attempt %d/%d), retrying in %.2fs",
            attempt,
            backoff.steps,
            delay,
        )
        context.sleep(delay)

    raise WaitTimeout(attempts=backoff.steps)
