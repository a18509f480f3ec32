"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them. Adapters
implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


@dataclass(frozen=True)
class Account:
    """
    Persisted account row.

    Created exactly once by registration and never updated. The email is
    stored exactly as submitted: case and surrounding characters are kept.
    """

    id: int
    email: str
    password_hash: str
    created_at: datetime

    def public(self) -> "PublicAccount":
        """Project the account onto the fields safe to return to clients."""
        return PublicAccount(id=self.id, email=self.email, created_at=self.created_at)


@dataclass(frozen=True)
class PublicAccount:
    """Account fields returned on successful registration (no password hash)."""

    id: int
    email: str
    created_at: datetime


class FailureReason(str, Enum):
    """Why a registration attempt did not create an account."""

    VALIDATION_FAILED = "validation_failed"
    EMAIL_TAKEN = "email_taken"
    STORE_UNAVAILABLE = "store_unavailable"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Account | None:
        """
        Look up an account by exact email match.

        No case folding or trimming is applied: "a@b.com" and "A@B.COM"
        are different keys.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        ...

    def insert(self, email: str, password_hash: str) -> Account:
        """
        Persist a new account row.

        The store assigns ``id`` and ``created_at``.

        Args:
            email: Email exactly as submitted
            password_hash: Encoded ``salt_hex:key_hex`` hash

        Returns:
            The created Account

        Raises:
            UniquenessViolation: If an account with this email already exists
            StoreUnavailable: If the store cannot be reached
        """
        ...
