"""Token bucket rate limiter for claim admission."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable


class TokenBucket:
    """Non-blocking token bucket owned by a single thread.

    Tokens refill continuously at ``refill_rate`` per second up to
    ``capacity``. The bucket starts full.
    """

    def __init__(
        self,
        capacity: int,
        refill_rate: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the bucket.

        Args:
            capacity: Maximum number of tokens held.
            refill_rate: Tokens added per second.
            clock: Monotonic clock in seconds, injectable for tests.
        """
        self.capacity = capacity
        self.tokens = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self.last_refill = clock()

    def refill(self) -> None:
        now = self._clock()
        elapsed_ms = int((now - self.last_refill) * 1000)
        tokens_to_add = elapsed_ms * self.refill_rate // 1000
        # last_refill moves only when at least one whole token was earned
        if tokens_to_add > 0:
            self.tokens = min(self.tokens + tokens_to_add, self.capacity)
            self.last_refill = now

    def try_consume(self, amount: int = 1) -> bool:
        """Take ``amount`` tokens if available.

        Returns:
            True if the tokens were taken, False if the bucket is short
            (in which case no tokens are removed).
        """
        self.refill()
        if self.tokens >= amount:
            self.tokens -= amount
            return True
        return False

    @property
    def retry_interval(self) -> float:
        """Seconds to wait after a refusal: a fraction of one refill interval."""
        if self.refill_rate <= 0:
            return 0.05
        return min(0.05, 1.0 / self.refill_rate / 4)
