"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core signup logic: password hashing, the
check-then-insert registration protocol and the availability check. It
defines its own port interfaces for infrastructure abstraction, ensuring
true hexagonal architecture decoupling.
"""

from .exceptions import (
    EmailTaken,
    MalformedStoredHash,
    RegistrationError,
    StoreUnavailable,
    UniquenessViolation,
    ValidationFailed,
)
from .hashing import PasswordHasher
from .ports import Account, AccountRepository, FailureReason, PublicAccount
from .registration import AvailabilityResult, RegistrationResult, RegistrationService

__all__ = [
    "Account",
    "AccountRepository",
    "AvailabilityResult",
    "EmailTaken",
    "FailureReason",
    "MalformedStoredHash",
    "PasswordHasher",
    "PublicAccount",
    "RegistrationError",
    "RegistrationResult",
    "RegistrationService",
    "StoreUnavailable",
    "UniquenessViolation",
    "ValidationFailed",
]
