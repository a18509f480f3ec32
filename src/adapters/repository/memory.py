"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local account store for development and tests. All operations take
a single lock, so each call is atomic on its own; a find_by_email followed
by an insert is not, which is exactly the window the registration service
has to tolerate.
"""

import threading
from datetime import datetime, timezone

from src.domain.exceptions import UniquenessViolation
from src.domain.ports import Account


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a list and a lock.

    Args:
        enforce_unique: When False the store behaves like a table with no
            unique index: duplicate emails are accepted on insert.
    """

    def __init__(self, enforce_unique: bool = True) -> None:
        self._enforce_unique = enforce_unique
        self._rows: list[Account] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            for row in self._rows:
                if row.email == email:
                    return row
        return None

    def insert(self, email: str, password_hash: str) -> Account:
        with self._lock:
            if self._enforce_unique and any(row.email == email for row in self._rows):
                raise UniquenessViolation(email)
            account = Account(
                id=self._next_id,
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._next_id += 1
            self._rows.append(account)
            return account

    def ping(self) -> None:
        return None

    def count(self, email: str) -> int:
        """Number of rows stored under exactly this email."""
        with self._lock:
            return sum(1 for row in self._rows if row.email == email)

    def all(self) -> list[Account]:
        with self._lock:
            return list(self._rows)
