"""Domain-specific exceptions for the expense store."""

class InvalidInputError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class NotFoundError(LookupError):
    """Raised when an identity or list position does not resolve to a live expense."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
