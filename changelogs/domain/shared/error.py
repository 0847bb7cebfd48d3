"""Error hierarchy for the changelogs server.

Error layers:
- ChangelogsError: Base class for all errors raised by this package
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: System-level failures like storage/network issues (503 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
The auth callback route converts its own failures to fixed plaintext 400 bodies
before they ever reach that handler.
"""


class ChangelogsError(Exception):
    """Base class for all changelogs errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(ChangelogsError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Resource already exists or version conflict."""


class DuplicateAccountError(ConflictError):
    """A concurrent login created the same user first (subject or email taken)."""


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


class UnauthenticatedError(DomainError):
    """No valid session on a protected route. Recovered by redirecting to login."""


class MalformedIdentityError(DomainError):
    """The identity token was missing, unreadable, or lacked required claims."""


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(ChangelogsError):
    """Base class for infrastructure/system errors."""


class PersistenceError(InfrastructureError):
    """Storage backend (database) is unavailable or rejected the operation."""


class ExternalServiceError(InfrastructureError):
    """External service (identity provider) is unavailable or failed."""


class AuthExchangeError(ExternalServiceError):
    """Authorization code exchange failed: state/nonce mismatch, rejected code, or network error."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected (including failed provider discovery)."""
