"""
Registration domain service - Check-then-insert account creation.

This module contains the core business logic for signup:
input validation, the uniqueness check, password hashing and the insert.

Check-then-Insert Protocol
==========================

1. Validate input (no store access on failure)
2. find_by_email(email) -> hit means EMAIL_TAKEN, nothing written
3. hash(password)
4. insert(email, hash)
   - UniquenessViolation -> EMAIL_TAKEN (another request won the race
     between steps 2 and 4)
5. Return the public account fields

The store is not assumed to offer a transactional check-and-insert. Two
concurrent registrations for one email can both pass step 2; the loser is
turned away at step 4 by the store's unique constraint and receives the
same answer it would have seen had it checked after the winner committed.

Emails are compared byte-for-byte. "a@b.com" and "A@B.COM" register as two
different accounts; see DESIGN.md for why this is kept.
"""

import logging
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from .exceptions import EmailTaken, StoreUnavailable, UniquenessViolation, ValidationFailed
from .hashing import PasswordHasher
from .ports import Account, AccountRepository, FailureReason, PublicAccount

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

MSG_CREATED = "User created successfully"
MSG_EMAIL_TAKEN = "Email address is already in use"
MSG_STORE_UNAVAILABLE = "An error occurred during signup"
MSG_INVALID_EMAIL = "Please enter a valid email address"
MSG_PASSWORD_TOO_SHORT = "Password must be at least {} characters long"
MSG_PASSWORD_MISMATCH = "Passwords don't match"
MSG_UNENCODABLE = "Contains characters that cannot be encoded"
MSG_EMAIL_AVAILABLE = "Email is available"
MSG_EMAIL_REGISTERED = "Email is already registered"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a registration attempt; never carries the password hash."""

    success: bool
    message: str
    reason: FailureReason | None = None
    field: str | None = None
    account: PublicAccount | None = None

    @classmethod
    def succeeded(cls, account: PublicAccount) -> "RegistrationResult":
        return cls(success=True, message=MSG_CREATED, account=account)

    @classmethod
    def failed(
        cls, reason: FailureReason, message: str, field: str | None = None
    ) -> "RegistrationResult":
        return cls(success=False, message=message, reason=reason, field=field)


@dataclass(frozen=True)
class AvailabilityResult:
    """Advisory answer to "is this email free?"; may be stale immediately."""

    available: bool
    message: str


@dataclass
class RegistrationService:
    """
    Domain service for account signup.

    Holds no per-request state; one instance may serve concurrent requests.
    All shared state lives in the repository.
    """

    repository: AccountRepository
    hasher: PasswordHasher
    min_password_length: int = MIN_PASSWORD_LENGTH

    def __post_init__(self) -> None:
        if self.min_password_length < MIN_PASSWORD_LENGTH:
            raise ValueError(f"min_password_length must be >= {MIN_PASSWORD_LENGTH}")

    def register(
        self, email: str, password: str, password_confirmation: str
    ) -> RegistrationResult:
        """
        Register a new account.

        Args:
            email: Email address, used exactly as given
            password: Plaintext password (hashed, never stored or logged)
            password_confirmation: Must equal password

        Returns:
            RegistrationResult with the public account on success, or a
            failure reason (VALIDATION_FAILED, EMAIL_TAKEN, STORE_UNAVAILABLE)
        """
        try:
            self._validate(email, password, password_confirmation)
        except ValidationFailed as e:
            return RegistrationResult.failed(
                FailureReason.VALIDATION_FAILED, e.message, field=e.field
            )

        try:
            account = self._claim(email, password)
        except EmailTaken:
            return RegistrationResult.failed(FailureReason.EMAIL_TAKEN, MSG_EMAIL_TAKEN)
        except StoreUnavailable as e:
            logger.error("Registration failed, account store unavailable: %s", e)
            return RegistrationResult.failed(
                FailureReason.STORE_UNAVAILABLE, MSG_STORE_UNAVAILABLE
            )

        logger.info("Registered account id=%s email=%s", account.id, account.email)
        return RegistrationResult.succeeded(account.public())

    def check_availability(self, email: str) -> AvailabilityResult:
        """
        Report whether an email is free to register. Read-only.

        Raises:
            ValidationFailed: If the email is malformed (store is not queried)
            StoreUnavailable: If the store cannot be reached
        """
        self._validate_email(email)
        if self.repository.find_by_email(email) is not None:
            return AvailabilityResult(available=False, message=MSG_EMAIL_REGISTERED)
        return AvailabilityResult(available=True, message=MSG_EMAIL_AVAILABLE)

    def _claim(self, email: str, password: str) -> Account:
        """
        Check, hash and insert. Both the pre-check hit and a lost insert
        race surface as EmailTaken.
        """
        if self.repository.find_by_email(email) is not None:
            raise EmailTaken(email)

        password_hash = self.hasher.hash(password)

        try:
            return self.repository.insert(email, password_hash)
        except UniquenessViolation:
            logger.info("Registration lost insert race for %s", email)
            raise EmailTaken(email) from None

    def _validate(self, email: str, password: str, password_confirmation: str) -> None:
        """First failing check wins: email, then password, then confirmation."""
        self._validate_email(email)
        _require_utf8("password", password)
        if len(password) < self.min_password_length:
            raise ValidationFailed(
                "password", MSG_PASSWORD_TOO_SHORT.format(self.min_password_length)
            )
        _require_utf8("password_confirmation", password_confirmation)
        if password != password_confirmation:
            raise ValidationFailed("password_confirmation", MSG_PASSWORD_MISMATCH)

    def _validate_email(self, email: str) -> None:
        """
        Check address shape with email-validator (no DNS lookup).

        The normalized form it returns is discarded: the caller's string is
        what gets looked up and stored.
        """
        if not email:
            raise ValidationFailed("email", MSG_INVALID_EMAIL)
        _require_utf8("email", email, MSG_INVALID_EMAIL)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            raise ValidationFailed("email", MSG_INVALID_EMAIL) from None


def _require_utf8(field: str, value: str, message: str = MSG_UNENCODABLE) -> None:
    """Reject strings holding lone surrogates, which cannot be hashed or stored."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationFailed(field, message) from None
