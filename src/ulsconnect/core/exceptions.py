class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    http_status = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""

    http_status = 404


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be broken (duplicate enrollment, report, ...)."""

    http_status = 409
