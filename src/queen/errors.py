"""Queen exception hierarchy.

Registration errors (``ConfigurationError`` and subclasses) are raised
while the app is being set up and abort startup. ``HTTPError`` and
``TransportError`` are raised while a request is in flight and are
handled once, at the dispatcher boundary.
"""

from dataclasses import dataclass


class QueenError(Exception):
    """Base for all queen-specific errors."""


class ConfigurationError(QueenError):
    """Raised when app configuration is invalid.

    Never surfaced to a request: every subclass fires during registration.
    """


class PatternError(ConfigurationError):
    """A route path contains a segment outside the allowed grammar."""


class EmptyHandlerError(ConfigurationError):
    """A route or plugin registration supplied no handler."""


class ConflictError(ConfigurationError):
    """Registration clashes with what is already registered.

    Raised for a plugin registered after the first route, and for two
    dynamic routes of the same method that compile to the same pattern.
    """


class TransportError(QueenError):
    """The incoming body stream ended before the request was complete."""


@dataclass(frozen=True, slots=True)
class HTTPError(QueenError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "not found") -> None:
        super().__init__(status=404, detail=detail)
