"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.
Errors raised while talking to the order source share the
OrderSourceError base so the sync loop can tell transient failures
(network, server) from a session that has ended (authentication).
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PermissionDenied(DomainException):
    """The platform refused one or more alerting modalities.

    Returned by ``AlertController.start()`` as a signal rather than raised,
    so a refused permission never interrupts polling.
    """

    def __init__(self, modalities: frozenset) -> None:
        self.modalities = frozenset(modalities)
        names = ", ".join(sorted(m.value for m in self.modalities))
        super().__init__(f"Permission denied for: {names}")


class AlertDeviceError(DomainException):
    """A sound or vibration device could not be engaged."""


class OrderSourceError(DomainException):
    """Base class for failures talking to the remote order source."""


class NetworkError(OrderSourceError):
    """No connectivity, or the request timed out."""


class ServerError(OrderSourceError):
    """The server answered with a non-success response or a bad payload."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthenticationError(OrderSourceError):
    """Session credentials are missing or expired; the user must log in again."""
