"""
Password hashing - PBKDF2-HMAC-SHA512 with a per-call random salt.

Stored formats:

- ``salt_hex:derived_key_hex`` - 100 000 iterations. The hex-encoded salt
  string itself is fed to PBKDF2 as the salt, so rows written by earlier
  deployments of the signup service verify unchanged.
- ``iterations:salt_hex:derived_key_hex`` - written when the hasher is
  configured above the default cost.

verify() always uses the cost recorded in (or implied by) the stored value,
so raising ``iterations`` never invalidates existing hashes.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass

from .exceptions import MalformedStoredHash

MIN_ITERATIONS = 100_000
MIN_SALT_BYTES = 32
MIN_KEY_LENGTH = 64

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class PasswordHasher:
    """
    Derives and verifies storage-safe password representations.

    Stateless apart from its cost parameters; safe to share across threads.
    """

    iterations: int = MIN_ITERATIONS
    salt_bytes: int = MIN_SALT_BYTES
    key_length: int = MIN_KEY_LENGTH
    digest: str = "sha512"

    def __post_init__(self) -> None:
        if self.iterations < MIN_ITERATIONS:
            raise ValueError(f"iterations must be >= {MIN_ITERATIONS}")
        if self.salt_bytes < MIN_SALT_BYTES:
            raise ValueError(f"salt_bytes must be >= {MIN_SALT_BYTES}")
        if self.key_length < MIN_KEY_LENGTH:
            raise ValueError(f"key_length must be >= {MIN_KEY_LENGTH}")

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Raises:
            UnicodeEncodeError: If the password is not encodable as UTF-8

        Returns:
            ``salt_hex:derived_key_hex`` (prefixed with the iteration count
            when above the default); differs on every call
        """
        salt = secrets.token_hex(self.salt_bytes)
        key = self._derive(password, salt, self.iterations, self.key_length).hex()
        if self.iterations == MIN_ITERATIONS:
            return f"{salt}:{key}"
        return f"{self.iterations}:{salt}:{key}"

    def verify(self, password: str, stored: str) -> bool:
        """
        Check a password against a stored hash.

        Malformed stored values and passwords that cannot be encoded are
        reported as a mismatch.
        """
        try:
            iterations, salt, expected = self.parse(stored)
            candidate = self._derive(password, salt, iterations, len(expected))
        except (MalformedStoredHash, UnicodeEncodeError):
            return False
        return hmac.compare_digest(candidate, expected)

    def parse(self, stored: str) -> tuple[int, str, bytes]:
        """
        Split a stored hash into iteration count, salt string and key bytes.

        Raises:
            MalformedStoredHash: If the value is not ``[iterations:]hex:hex``
        """
        parts = stored.split(":") if isinstance(stored, str) else []
        if len(parts) == 2:
            iterations = MIN_ITERATIONS
        elif len(parts) == 3:
            if not parts[0].isascii() or not parts[0].isdigit():
                raise MalformedStoredHash("iteration count must be an integer")
            iterations = int(parts[0])
            if iterations < MIN_ITERATIONS:
                raise MalformedStoredHash(f"iteration count below {MIN_ITERATIONS}")
            parts = parts[1:]
        else:
            raise MalformedStoredHash("expected [iterations:]salt:key")
        salt, key_hex = parts
        if not salt or not key_hex or not _is_hex(salt) or not _is_hex(key_hex):
            raise MalformedStoredHash("salt and key must be non-empty hex")
        if len(key_hex) % 2:
            raise MalformedStoredHash("key has odd hex length")
        return iterations, salt, bytes.fromhex(key_hex)

    def _derive(self, password: str, salt: str, iterations: int, length: int) -> bytes:
        return hashlib.pbkdf2_hmac(
            self.digest, password.encode(), salt.encode(), iterations, dklen=length
        )


def _is_hex(value: str) -> bool:
    return all(ch in _HEX_DIGITS for ch in value)
