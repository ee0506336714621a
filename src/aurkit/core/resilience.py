"""
Retry timing for AUR requests.

Provides exponential backoff with jitter for transient network failures
and clamps server-provided Retry-After hints on rate limiting.
"""

import logging
import random

logger = logging.getLogger(__name__)


class ExponentialBackoff:
    """Implements exponential backoff with jitter for retry logic."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 60.0, max_retries: int = 3):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_retries = max_retries

    @classmethod
    def from_config(cls, config) -> "ExponentialBackoff":
        return cls(
            base_delay=config.base_delay,
            max_delay=config.max_delay,
            max_retries=config.max_retries,
        )

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff and jitter."""
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        # Add jitter (±25%)
        jitter = delay * 0.25 * (random.random() * 2 - 1)
        return max(0, delay + jitter)

    def retry_after(self, header: str | None, attempt: int) -> float:
        """
        Delay before retrying a rate-limited request.

        Uses the Retry-After header (seconds) when it is numeric, falling
        back to the backoff delay. Never exceeds max_delay.
        """
        if header is not None:
            try:
                return min(max(0.0, float(header)), self.max_delay)
            except ValueError:
                logger.debug(f"Ignoring non-numeric Retry-After: {header!r}")
        return self.calculate_delay(attempt)

    def should_retry(self, attempt: int) -> bool:
        """Check if should retry based on attempt count."""
        return attempt < self.max_retries
