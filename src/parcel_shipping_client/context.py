from __future__ import annotations

import threading
import time
from typing import Optional

from .errors import CancellationError, RequestTimeoutError


class RequestContext:
    """Carries cancellation and an optional deadline for client calls.

    The deadline is an absolute ``time.monotonic()`` value. ``cancel()`` may be
    called from any thread; the client checks the context before each request
    and again once the response has arrived.
    """

    def __init__(self, deadline: Optional[float] = None):
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "RequestContext":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or ``None`` when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline."""
        if self.cancelled:
            raise CancellationError("request context was cancelled")
        if self.expired:
            raise RequestTimeoutError("request context deadline exceeded")
