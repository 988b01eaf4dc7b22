"""
In-memory sliding-window rate limiting.

Each identifier (a connector id for public submissions) owns an ordered
sequence of request timestamps. A check prunes timestamps older than the
window, then admits the request if fewer than ``max_requests`` remain.

State is process-local and is lost on restart. This is abuse mitigation,
not accounting, so that is acceptable.

Usage::

    from apps.core.throttling import RateLimitExceeded, SlidingWindowRateLimiter

    limiter = SlidingWindowRateLimiter()

    result = limiter.check(str(connector_id), max_requests=100, window_seconds=3600)
    if not result.allowed:
        raise RateLimitExceeded.from_result(result)
"""

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from apps.core.logging import get_logger

logger = get_logger(__name__)

# Once more identifiers than this are tracked, empty windows are swept.
DEFAULT_CLEANUP_THRESHOLD = 1000


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check."""

    allowed: bool
    remaining: int
    reset_time: float  # Unix timestamp (seconds) when the oldest slot frees up

    @property
    def reset_time_ms(self) -> int:
        return int(self.reset_time * 1000)


class RateLimitExceeded(Exception):
    """Raised when a rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        retry_after: int,
        reset_time: float | None = None,
        remaining: int = 0,
    ) -> None:
        super().__init__(message)
        self.retry_after = retry_after
        self.reset_time = reset_time
        self.remaining = remaining

    @classmethod
    def from_result(cls, result: RateLimitResult, now: float | None = None) -> "RateLimitExceeded":
        """Build the exception from a rejected check."""
        if now is None:
            now = time.time()
        return cls(
            "Rate limit exceeded. Please try again later.",
            retry_after=max(0, math.ceil(result.reset_time - now)),
            reset_time=result.reset_time,
            remaining=result.remaining,
        )


@dataclass
class _Window:
    """Timestamps for one identifier, guarded by its own lock."""

    timestamps: deque[float] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)
    evicted: bool = False

    def prune(self, window_start: float) -> None:
        while self.timestamps and self.timestamps[0] <= window_start:
            self.timestamps.popleft()


class SlidingWindowRateLimiter:
    """
    Sliding-window request counter keyed by identifier.

    Check-and-increment is atomic per identifier: two concurrent requests
    cannot both observe the last free slot. Different identifiers never
    contend with each other except briefly while their window is looked up.

    Lock order is always registry lock, then window lock. ``check`` never
    holds a window lock while waiting on the registry.
    """

    def __init__(
        self,
        cleanup_threshold: int = DEFAULT_CLEANUP_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cleanup_threshold = cleanup_threshold
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._registry_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def _window_for(self, identifier: str) -> _Window:
        with self._registry_lock:
            window = self._windows.get(identifier)
            if window is None:
                window = _Window()
                self._windows[identifier] = window
            return window

    def check(
        self,
        identifier: str,
        *,
        max_requests: int,
        window_seconds: float,
    ) -> RateLimitResult:
        """
        Check and consume one request slot for ``identifier``.

        Args:
            identifier: Rate limit bucket (e.g. connector id).
            max_requests: Maximum requests admitted within the window.
            window_seconds: Trailing window duration in seconds.

        Returns:
            RateLimitResult. ``remaining`` counts slots left after this request.
        """
        while True:
            window = self._window_for(identifier)
            with window.lock:
                if window.evicted:
                    # Swept between lookup and lock; retry with a fresh window
                    continue

                now = self._clock()
                window.prune(now - window_seconds)
                count = len(window.timestamps)
                allowed = count < max_requests

                if allowed:
                    window.timestamps.append(now)
                    remaining = max_requests - count - 1
                else:
                    remaining = 0

                oldest = window.timestamps[0] if window.timestamps else now
                result = RateLimitResult(
                    allowed=allowed,
                    remaining=remaining,
                    reset_time=oldest + window_seconds,
                )
                break

        if len(self._windows) > self.cleanup_threshold:
            self._sweep(window_seconds)

        logger.debug(
            "rate_limit_checked",
            identifier=identifier,
            count=count + (1 if allowed else 0),
            limit=max_requests,
            remaining=remaining,
        )
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                identifier=identifier,
                limit=max_requests,
                window=window_seconds,
            )
        return result

    def status(
        self,
        identifier: str,
        *,
        max_requests: int,
        window_seconds: float,
    ) -> RateLimitResult:
        """Report the current state for ``identifier`` without consuming a slot."""
        now = self._clock()
        with self._registry_lock:
            window = self._windows.get(identifier)
        if window is None:
            return RateLimitResult(
                allowed=max_requests > 0,
                remaining=max(0, max_requests),
                reset_time=now + window_seconds,
            )

        with window.lock:
            window_start = now - window_seconds
            live = [ts for ts in window.timestamps if ts > window_start]

        oldest = live[0] if live else now
        return RateLimitResult(
            allowed=len(live) < max_requests,
            remaining=max(0, max_requests - len(live)),
            reset_time=oldest + window_seconds,
        )

    def reset(self, identifier: str) -> None:
        """Forget all recorded requests for ``identifier``."""
        with self._registry_lock:
            window = self._windows.pop(identifier, None)
            if window is not None:
                with window.lock:
                    window.evicted = True
        logger.info("rate_limit_reset", identifier=identifier)

    def _sweep(self, window_seconds: float) -> None:
        """Drop identifiers whose pruned window is empty."""
        window_start = self._clock() - window_seconds
        removed = 0
        with self._registry_lock:
            for identifier, window in list(self._windows.items()):
                with window.lock:
                    window.prune(window_start)
                    if not window.timestamps:
                        window.evicted = True
                        del self._windows[identifier]
                        removed += 1

        if removed:
            logger.info("rate_limit_windows_swept", removed=removed, tracked=len(self._windows))
