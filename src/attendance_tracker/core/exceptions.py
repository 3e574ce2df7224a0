from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable, client-visible error kind.
    """

    code = "DomainError"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class AlreadyOpenError(DomainError):
    """Raised on check-in while today's latest session is still open."""

    code = "AlreadyOpen"
    default_message = "Already checked in; check out before starting a new session"


class NoOpenSessionError(DomainError):
    """Raised on check-out when nothing is open today."""

    code = "NoOpenSession"
    default_message = "No open session found for today"


class InvalidRangeError(DomainError):
    """Raised when date bounds are missing, malformed or reversed."""

    code = "InvalidRange"
    default_message = "Invalid date range"


class NotFoundError(DomainError):
    code = "NotFound"
    default_message = "Resource not found"


class StoreUnavailableError(DomainError):
    """Raised when the persistence layer fails or cannot be reached."""

    code = "StoreUnavailable"
    default_message = "Service temporarily unavailable, please retry later"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the caller is anonymous."""

    code = "Unauthenticated"
    default_message = "Authentication required"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "Forbidden"
    default_message = "You do not have permission to perform this action"


class SessionConflictError(Exception):
    """Raised by repositories when a write would break session uniqueness.

    Not a DomainError: services translate it before it reaches a client.
    """


class ValidationError(DomainError):
    """Raised when request input is missing or malformed."""

    code = "BadRequest"
    default_message = "Invalid request"
