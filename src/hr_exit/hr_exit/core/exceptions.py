class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""


class ConflictError(DomainError):
    """Raised when a write is based on a stale version of a record."""


class AuthenticationError(DomainError):
    """Raised when the request carries no authenticated user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
