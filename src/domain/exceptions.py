"""
Domain exceptions - Semantic error types for the identity subsystem.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Every AuthError carries the HTTP status the transport layer should use.
"""


class AuthError(Exception):
    """Base class for identity domain errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class BadRequest(AuthError):
    """Request was understood but cannot be honoured."""

    status_code = 400


class ValidationError(BadRequest):
    """Malformed or missing input."""

    def __init__(self, errors: dict[str, str]) -> None:
        detail = "; ".join(f"{field}: {reason}" for field, reason in errors.items())
        super().__init__(detail)
        self.errors = errors


class AlreadyExists(BadRequest):
    """Email or username is already taken by another account."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} already exists")
        self.field = field


class Unauthorized(AuthError):
    """Authentication failed. Deliberately carries no reason."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("invalid credentials")


class NotFound(AuthError):
    """Requested record does not exist."""

    status_code = 404


class InternalError(AuthError):
    """Hashing, signing, persistence or mail failure."""

    pass


class MailDeliveryError(InternalError):
    """Verification mail could not be delivered."""

    pass


class RepositoryError(Exception):
    """Persistence failure raised by repository adapters."""

    pass


class DuplicateKeyError(RepositoryError):
    """Uniqueness violation on a user column ("email" or "username")."""

    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate value for {field}")
        self.field = field
