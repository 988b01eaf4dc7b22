"""
Exceptions for destination dispatch.

Handlers raise ``DispatchConfigError`` for problems retrying cannot fix
(missing or malformed configuration, target not found, permission
denied) and ``DispatchTransientError`` for everything worth another
attempt. The retry policy decides what to do with each.
"""


class DispatchError(Exception):
    """Base exception for destination dispatch errors."""

    pass


class DispatchConfigError(DispatchError):
    """Destination configuration is invalid. Never retried."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DispatchTransientError(DispatchError):
    """Temporary downstream failure. Retried with backoff."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class DestinationNotImplemented(DispatchError):
    """Destination type has no working backend on this server. Never retried."""

    pass


class DispatchRetriesExhausted(DispatchError):
    """All attempts failed."""

    def __init__(self, destination_type: str, attempts: int, last_error: BaseException | None):
        last_message = str(last_error) if last_error is not None else "Unknown error"
        super().__init__(
            f"Failed to deliver to {destination_type} after {attempts} attempt(s). "
            f"Last error: {last_message}"
        )
        self.destination_type = destination_type
        self.attempts = attempts
        self.last_error = last_error
