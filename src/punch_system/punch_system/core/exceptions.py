class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record or schedule does not exist."""


class InvalidTimeFormat(ValidationError):
    """Raised when an HH:mm value is malformed.

    A stored shift segment carrying such a value is corrupt; callers surface it
    as a configuration error instead of retrying.
    """
