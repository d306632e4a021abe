"""
Console exceptions.

- ValidationError: operator input rejected before any network call
- BackendError: a backend request failed (transport error or non-2xx status)
- PayloadError: an inbound topic message could not be decoded
"""


class ConsoleError(Exception):
    """Base class for console errors."""


class ValidationError(ConsoleError):
    """Operator input is incomplete or invalid. The message is shown as-is."""


class BackendError(ConsoleError):
    """Request to the automation backend failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class PayloadError(ConsoleError):
    """Malformed inbound message on a topic."""
