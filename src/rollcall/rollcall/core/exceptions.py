class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or invalid."""


class NotFoundError(DomainError):
    """Raised when a referenced student does not exist."""


class NoStudentsError(DomainError):
    """Raised when a roll-call is started with an empty student registry."""


class ConflictError(DomainError):
    """Raised when a student identifier is already taken."""


class UnavailableError(DomainError):
    """Raised when the database cannot be reached."""
