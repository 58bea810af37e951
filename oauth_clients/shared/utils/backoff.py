# oauth_clients/shared/utils/backoff.py

"""
Bounded exponential backoff for reconnect loops.
"""

import asyncio
from dataclasses import dataclass, field


@dataclass
class ExponentialBackoff:
    """
    Delay calculator for consecutive retry attempts.

    The first delay is min_delay, each following one is multiplied by factor
    and the result never exceeds max_delay.

    Attributes:
        min_delay: First and smallest delay, in seconds
        max_delay: Upper bound for any delay, in seconds
        factor: Multiplier applied after every failed attempt
    """

    min_delay: float
    max_delay: float
    factor: float = 2.0
    failures: int = field(default=0, init=False)

    def __post_init__(self):
        """Validate backoff parameters."""
        if self.min_delay < 0:
            raise ValueError("min_delay must be non-negative")
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must be >= min_delay")
        if self.factor < 1:
            raise ValueError("factor must be >= 1")

    def next_delay(self) -> float:
        """
        Register a failed attempt and return the delay before the next one.

        Returns:
            Delay in seconds, between min_delay and max_delay
        """
        delay = self.min_delay * (self.factor ** self.failures)
        self.failures += 1
        return min(delay, self.max_delay)

    def reset(self) -> None:
        """Start over from min_delay."""
        self.failures = 0


async def wait_for_stop(stop_event: asyncio.Event, delay: float) -> bool:
    """
    Sleep for delay seconds unless stop_event is set first.

    Args:
        stop_event: Event signalling shutdown
        delay: Maximum time to wait, in seconds

    Returns:
        True if the event was set, False if the delay elapsed
    """
    if stop_event.is_set():
        return True
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return False
    return True
