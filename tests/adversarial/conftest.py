"""
Shared fixtures for adversarial tests.

Provides a store wrapper that holds every caller at a barrier between the
uniqueness pre-check and the insert, so concurrent registrations all see
"not found" before any of them writes.
"""

import threading

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.ports import Account

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


class RacingRepository:
    """
    Implements AccountRepository by delegating to an inner store.

    find_by_email waits on a barrier after reading, which opens the
    check-then-insert window as wide as it can be.
    """

    def __init__(self, inner: InMemoryAccountRepository, parties: int) -> None:
        self.inner = inner
        self._barrier = threading.Barrier(parties, timeout=30)

    def find_by_email(self, email: str) -> Account | None:
        found = self.inner.find_by_email(email)
        self._barrier.wait()
        return found

    def insert(self, email: str, password_hash: str) -> Account:
        return self.inner.insert(email, password_hash)


@pytest.fixture
def racing_repository_factory():
    """Build a RacingRepository over a fresh store for N concurrent callers."""

    def factory(parties: int, enforce_unique: bool = True) -> RacingRepository:
        return RacingRepository(InMemoryAccountRepository(enforce_unique), parties)

    return factory
