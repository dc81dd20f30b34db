class DomainError(Exception):
    """Base exception for business rule violations."""


class BadRequestError(DomainError):
    """Raised when a mandatory input is missing."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates a schema constraint."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be broken (e.g. same-day attendance)."""
