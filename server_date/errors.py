"""
Exception types for server_date.

Probe failures (TransportError, BadResponseError) are recovered from inside
the estimation loop. ConfigurationError is raised straight to the caller.
"""

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .sample import Sample


class ServerDateError(Exception):
    """Base class for every error raised by this package."""


class TransportError(ServerDateError):
    """The exchange could not be completed (network, timeout, malformed response)."""


class BadResponseError(ServerDateError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TickNotObservedError(ServerDateError):
    """Tick alignment ran out of attempts without seeing the server's second change."""

    def __init__(self, attempts: int, samples: Sequence["Sample"]):
        super().__init__(
            f"No tick observed after {attempts} attempts ({len(samples)} samples)"
        )
        self.attempts = attempts
        self.samples = list(samples)


class ConfigurationError(ServerDateError, ValueError):
    """Malformed options passed to a public entry point."""


__all__ = [
    "ServerDateError",
    "TransportError",
    "BadResponseError",
    "TickNotObservedError",
    "ConfigurationError",
]
