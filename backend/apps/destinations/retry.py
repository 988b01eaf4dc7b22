"""
Retry policy for destination dispatch.

The dispatcher wraps every handler call in one ``RetryPolicy`` so backoff
lives in one place instead of in each handler.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from django.conf import settings

from apps.core.logging import get_logger

from .exceptions import (
    DestinationNotImplemented,
    DispatchConfigError,
    DispatchRetriesExhausted,
    DispatchTransientError,
)

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_BASE_DELAY_SECONDS = 1.0
DEFAULT_ATTEMPT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRY_AFTER_SECONDS = 10.0
DEFAULT_HANDLER_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    Attempt 1 runs immediately; after attempt n fails the policy waits
    ``base_delay * 2 ** (n - 1)`` seconds (1s, 2s, 4s with the defaults).
    A ``DispatchTransientError`` carrying ``retry_after`` replaces the
    computed delay for that one wait, capped at ``max_retry_after``.

    Each attempt is bounded by ``attempt_timeout``; a timeout counts as a
    transient failure. The whole run, waits included, is bounded by
    ``deadline``.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS
    attempt_timeout: float | None = DEFAULT_ATTEMPT_TIMEOUT_SECONDS
    max_retry_after: float = DEFAULT_MAX_RETRY_AFTER_SECONDS
    deadline: float | None = DEFAULT_HANDLER_TIMEOUT_SECONDS
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.DISPATCH_MAX_ATTEMPTS,
            base_delay=settings.DISPATCH_BACKOFF_BASE_SECONDS,
            attempt_timeout=settings.DISPATCH_ATTEMPT_TIMEOUT_SECONDS,
            max_retry_after=settings.DISPATCH_MAX_RETRY_AFTER_SECONDS,
            deadline=settings.DISPATCH_HANDLER_TIMEOUT_SECONDS,
        )

    def backoff(self, attempt: int) -> float:
        """Delay to wait after ``attempt`` (1-based) has failed."""
        return self.base_delay * (2 ** (attempt - 1))

    def is_retryable(self, error: BaseException) -> bool:
        return not isinstance(error, DispatchConfigError | DestinationNotImplemented)

    def delay_for(self, attempt: int, error: BaseException) -> float:
        if isinstance(error, DispatchTransientError) and error.retry_after is not None:
            return min(max(0.0, float(error.retry_after)), self.max_retry_after)
        return self.backoff(attempt)

    async def _attempt(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self.attempt_timeout is None:
            return await operation()
        try:
            return await asyncio.wait_for(operation(), timeout=self.attempt_timeout)
        except TimeoutError as e:
            raise DispatchTransientError(
                f"Timed out after {self.attempt_timeout:g}s"
            ) from e

    async def run(self, operation: Callable[[], Awaitable[T]], *, label: str) -> T:
        """
        Run ``operation`` until it succeeds, fails fatally, or attempts run out.

        Args:
            operation: Zero-argument coroutine factory, called once per attempt.
            label: Destination type, used in logs and the final error.

        Raises:
            DispatchConfigError / DestinationNotImplemented: Immediately, without retry.
            DispatchRetriesExhausted: After ``max_attempts`` failed attempts.
            DispatchTransientError: ``deadline`` passed before the run finished.
        """
        if self.deadline is None:
            return await self._run_attempts(operation, label)
        try:
            async with asyncio.timeout(self.deadline):
                return await self._run_attempts(operation, label)
        except TimeoutError as e:
            logger.warning(
                "destination_deadline_exceeded",
                **{"destination.type": label},
                deadline_seconds=self.deadline,
            )
            raise DispatchTransientError(
                f"Failed to deliver to {label} within {self.deadline:g}s"
            ) from e

    async def _run_attempts(self, operation: Callable[[], Awaitable[T]], label: str) -> T:
        last_error: BaseException | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(operation)
            except Exception as e:
                if not self.is_retryable(e):
                    logger.warning(
                        "destination_attempt_fatal",
                        **{"destination.type": label},
                        attempt=attempt,
                        error=str(e),
                    )
                    raise
                last_error = e
                logger.warning(
                    "destination_attempt_failed",
                    **{"destination.type": label},
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(e),
                )

            if attempt < self.max_attempts:
                delay = self.delay_for(attempt, last_error)
                logger.info(
                    "destination_retry_scheduled",
                    **{"destination.type": label},
                    delay_seconds=delay,
                )
                await self.sleep(delay)

        raise DispatchRetriesExhausted(label, attempts=self.max_attempts, last_error=last_error)
