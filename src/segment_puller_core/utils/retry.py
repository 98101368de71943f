"""Retry backoff engine for segment pulls.

This module provides the backoff calculation and blocking wait used between
segment pull attempts. The decision whether to retry at all belongs to the
caller; the engine only knows how many retries are allowed and how long to
wait before each one.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = True
    jitter_range: tuple[float, float] = (0.5, 1.5)

    def __post_init__(self) -> None:
        """Validate retry configuration."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")  # noqa: TRY003
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")  # noqa: TRY003
        if self.max_delay <= 0:
            raise ValueError("max_delay must be positive")  # noqa: TRY003
        if self.exponential_base <= 1:
            raise ValueError("exponential_base must be greater than 1")  # noqa: TRY003
        if self.jitter_range[0] >= self.jitter_range[1]:
            raise ValueError(  # noqa: TRY003
                "jitter_range must be (min, max) where min < max"
            )

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, the initial one included."""
        return self.max_retries + 1


class RetryEngine:
    """Core retry engine that handles backoff calculations and waiting."""

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the retry engine with configuration.

        Args:
            config: Retry configuration parameters.
            sleep: Blocking sleep function, replaceable in tests.
        """
        self.config = config
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Total number of attempts allowed by the configuration."""
        return self.config.max_attempts

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a specific retry attempt.

        Args:
            attempt: The retry attempt number (0-based).

        Returns:
            Delay in seconds before the next retry.
        """
        # Calculate exponential backoff
        delay = min(
            self.config.base_delay * (self.config.exponential_base**attempt),
            self.config.max_delay,
        )

        # Add jitter if enabled
        if self.config.jitter:
            jitter_factor = random.uniform(*self.config.jitter_range)  # noqa: S311
            delay *= jitter_factor

        return delay

    def wait(self, attempt: int) -> float:
        """Block the calling thread for the backoff of ``attempt``.

        Args:
            attempt: The retry attempt number (0-based).

        Returns:
            The number of seconds waited.
        """
        delay = self.calculate_delay(attempt)
        if delay > 0:
            self._sleep(delay)
        return delay


def create_retry_engine(
    max_retries: int = 2,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    *,
    jitter: bool = True,
    jitter_range: tuple[float, float] = (0.5, 1.5),
    sleep: Callable[[float], None] = time.sleep,
) -> RetryEngine:
    """Create a retry engine with the specified configuration.

    Args:
        max_retries: Maximum number of retry attempts.
        base_delay: Initial delay between retries in seconds.
        max_delay: Maximum delay between retries in seconds.
        exponential_base: Base for exponential backoff calculation.
        jitter: Whether to add random jitter to delays.
        jitter_range: Range for jitter factor (min, max).
        sleep: Blocking sleep function.

    Returns:
        Configured RetryEngine instance.
    """
    config = RetryConfig(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter,
        jitter_range=jitter_range,
    )
    return RetryEngine(config, sleep=sleep)


def create_segment_pull_retry_engine() -> RetryEngine:
    """Create a retry engine with the default segment pull policy (3 attempts)."""
    return create_retry_engine(
        max_retries=2,
        base_delay=1.0,
        max_delay=60.0,
        exponential_base=2.0,
        jitter=True,
    )
