"""Per-command deadline shared by every suspension point of a provider call."""

from __future__ import annotations

import time

from aigit_core.errors import DeadlineExceededError


class Deadline:
    """A monotonic-clock budget. ``Deadline(None)`` never expires."""

    def __init__(self, seconds: float | None = None):
        self.seconds = seconds
        self._expires_at = None if seconds is None else time.monotonic() + seconds

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        if self.expired:
            raise DeadlineExceededError(f"deadline of {self.seconds:g}s exceeded")

    def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, or until the deadline fires.

        Raises DeadlineExceededError as soon as the deadline cuts the wait
        short; the caller must not retry after that.
        """
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            time.sleep(remaining)
            raise DeadlineExceededError(f"deadline of {self.seconds:g}s exceeded while waiting {delay:g}s to retry")
        time.sleep(delay)
