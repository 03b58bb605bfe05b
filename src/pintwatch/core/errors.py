"""Exception hierarchy raised by the consensus and moderation engine.

Services raise these; the HTTP layer maps them onto status codes in
``pintwatch.main``. Every error is raised before anything is written, so a
rejected submission never leaves partial state behind.
"""

from __future__ import annotations


class PintwatchError(RuntimeError):
    """Base exception for engine failures."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(PintwatchError):
    """Raised when a submission is malformed or incomplete."""

    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field


class Unauthenticated(PintwatchError):
    """Raised when a mutating operation has no resolvable user identity."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(detail)


class PermissionDenied(PintwatchError):
    """Raised when the caller lacks the admin or ownership rights an action needs."""


class NotFound(PintwatchError):
    """Raised when the referenced subject does not exist."""


class InvalidTransition(PintwatchError):
    """Raised when a state machine is asked for a transition it does not allow."""


class DependencyUnavailable(PintwatchError):
    """Raised when a required collaborator (trust lookup) cannot be reached."""
