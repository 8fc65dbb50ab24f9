"""Retry policy with exponential backoff."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Bounded retries with exponential backoff.

    The delay before retry number n+1 (after n retries so far) is
    base_delay_sec * 2**n, optionally capped at max_delay_sec.
    """

    max_retries: int = 3
    base_delay_sec: float = 1.0
    max_delay_sec: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_sec < 0:
            raise ValueError("base_delay_sec must be >= 0")
        if self.max_delay_sec is not None and self.max_delay_sec < 0:
            raise ValueError("max_delay_sec must be >= 0")

    def can_retry(self, retry_count: int) -> bool:
        return retry_count < self.max_retries

    def delay_for(self, retry_count: int) -> float:
        """Seconds to wait before the next attempt, given retries done so far."""
        delay = self.base_delay_sec * (2 ** max(retry_count, 0))
        if self.max_delay_sec is not None:
            return min(delay, self.max_delay_sec)
        return delay
