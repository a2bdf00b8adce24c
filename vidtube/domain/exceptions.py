from __future__ import annotations


class DomainError(Exception):
    """Base for expected failures surfaced to API callers."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, *, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"


class InvalidCredentialsError(DomainError):
    """Login failed; does not tell which of identifier or password was wrong."""

    status_code = 401
    default_message = "Invalid user credentials"


class UnauthorizedError(DomainError):
    """No token was presented."""

    status_code = 401
    default_message = "Unauthorized request"


class InvalidTokenError(DomainError):
    """Bad signature, expired, malformed, or the subject no longer exists."""

    status_code = 401
    default_message = "Invalid token"


class TokenExpiredError(DomainError):
    """Refresh token was superseded or revoked."""

    status_code = 401
    default_message = "Refresh token is expired or used"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Resource already exists"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found"


class InternalError(DomainError):
    status_code = 500
    default_message = "Internal server error"


class MediaStorageError(RuntimeError):
    """Remote media storage rejected or failed an upload."""


class ConfigurationError(RuntimeError):
    """Service cannot start with the current settings."""


class TokenConfigurationError(ConfigurationError):
    """Token secrets are missing or reused between token kinds."""
