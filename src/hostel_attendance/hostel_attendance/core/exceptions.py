class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when a referenced person, record, rule or ledger entry does not exist."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness or state invariant."""


class InvalidArgumentError(DomainError):
    """Raised when input is out of range or malformed."""


class ValidationError(InvalidArgumentError):
    """Raised when input data is invalid or violates domain rules."""
