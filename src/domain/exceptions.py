"""
Domain exceptions - Semantic error types for account registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class ValidationFailed(RegistrationError):
    """Credential input is malformed; raised before any store access."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class EmailTaken(RegistrationError):
    """Email already belongs to an account."""

    pass


class UniquenessViolation(RegistrationError):
    """Store rejected an insert because the email is already present."""

    pass


class StoreUnavailable(RegistrationError):
    """Account store failed to respond."""

    pass


class MalformedStoredHash(RegistrationError):
    """Stored password hash could not be parsed."""

    pass
