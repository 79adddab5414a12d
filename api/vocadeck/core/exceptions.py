"""
Custom exceptions for the application.
"""


class VocadeckException(Exception):
    """Base exception for all Vocadeck application exceptions."""
    pass


class ValidationError(VocadeckException):
    """Raised when validation fails."""
    pass


class NotFoundError(VocadeckException):
    """Raised when a requested resource is not found (or is not owned by the caller)."""
    pass


class ConflictError(VocadeckException):
    """Raised when a write collides with another one (stale version, duplicate key, failed batch)."""
    pass


class AuthenticationError(VocadeckException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(VocadeckException):
    """Raised when authorization fails."""
    pass


class EmptyInputError(ValidationError):
    """Raised when CSV text holds no data rows at all."""
    pass


class MalformedRowError(VocadeckException):
    """A single CSV row that cannot become a card. Recovered inside decode."""

    def __init__(self, line_number: int, reason: str):
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class SessionStateError(ConflictError):
    """Raised when a study session cannot accept the requested transition."""
    pass
