"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory account store
- A password hasher at production cost
- A registration service wired to both
"""

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.hashing import PasswordHasher
from src.domain.registration import RegistrationService


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """Password hasher with default (minimum allowed) cost."""
    return PasswordHasher()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    """Fresh in-memory store enforcing email uniqueness."""
    return InMemoryAccountRepository()


@pytest.fixture
def service(repository: InMemoryAccountRepository, hasher: PasswordHasher) -> RegistrationService:
    """Registration service backed by the in-memory store."""
    return RegistrationService(repository=repository, hasher=hasher)
