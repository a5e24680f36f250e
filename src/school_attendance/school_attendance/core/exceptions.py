class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MissingReferenceError(ValidationError):
    """Raised when a payload references a class/student that does not exist."""


class ConflictError(DomainError):
    """Raised on duplicate classes or deleting a class that still has students."""


class NotFoundError(DomainError):
    """Raised when the addressed entity does not exist."""
