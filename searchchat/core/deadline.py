"""Per-turn deadline shared by the search and generation steps.

A `Deadline` is an absolute time bound created once per turn. Every step reads the
remaining budget from the same object, so a slow search leaves less time for
generation. The deadline is a context manager and is released when the turn ends,
on success and on every error path.
"""

from __future__ import annotations

import time
from typing import Callable

from searchchat.core.errors import DeadlineExceededError


class Deadline:
    """Absolute, releasable time bound.

    Args:
        timeout: Budget in seconds, measured from construction.
        clock: Monotonic clock returning seconds. Injected by tests.
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._clock = clock
        self.timeout = float(timeout)
        self.expires_at = clock() + self.timeout
        self.released = False

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.released or self._clock() >= self.expires_at

    def check(self) -> None:
        """Raise `DeadlineExceededError` once the deadline has passed or was released."""
        if self.expired:
            raise DeadlineExceededError(
                f"deadline of {self.timeout:g}s exceeded"
            )

    def release(self) -> None:
        """Mark the deadline as finished. Later checks fail immediately."""
        self.released = True

    def __enter__(self) -> "Deadline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Deadline(timeout={self.timeout:g}, remaining={self.remaining():.2f}, released={self.released})"
