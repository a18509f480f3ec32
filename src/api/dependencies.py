"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from functools import lru_cache

from fastapi import Request

from src.config.settings import get_settings
from src.domain.hashing import PasswordHasher
from src.domain.ports import AccountRepository
from src.domain.registration import RegistrationService


def get_repository(request: Request) -> AccountRepository:
    """
    Get the account store from app state.

    The repository is created during app lifespan startup and stored in
    app.state.
    """
    return request.app.state.repository


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Build the password hasher from settings (stateless, shared)."""
    settings = get_settings()
    return PasswordHasher(
        iterations=settings.hash_iterations,
        salt_bytes=settings.hash_salt_bytes,
        key_length=settings.hash_key_length,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the account store and password hasher for the domain service.
    """
    return RegistrationService(
        repository=get_repository(request),
        hasher=get_password_hasher(),
        min_password_length=get_settings().password_min_length,
    )
