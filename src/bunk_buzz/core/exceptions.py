class DomainError(Exception):
    """Anything a service rejects; ``status_code`` is what the API answers with."""

    status_code = 400


class ValidationError(DomainError):
    """A request field failed parsing or range checks; ``field`` names it when known."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidInputError(ValidationError):
    """Raised by the attendance calculator on impossible lecture counts."""


class ConflictError(DomainError):
    """Raised when a write collides with existing data (duplicate, overlap)."""


class AuthenticationError(DomainError):
    """Bad password, or a missing, expired or revoked token."""

    status_code = 401


class AuthorizationError(DomainError):
    """Signed in, but the account may not do this yet (e.g. email unverified)."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a resource does not exist or is not owned by the caller."""

    status_code = 404


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing."""
