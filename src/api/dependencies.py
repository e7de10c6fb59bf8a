"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from functools import lru_cache

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleNotifier
from src.config.settings import get_settings
from src.domain.events import EventHooks
from src.domain.signup import SignupService

# Module-level singleton - subscribers register here at startup
_signup_events = EventHooks()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


@lru_cache
def get_notifier() -> ConsoleNotifier:
    """Get console notifier (singleton) linking to the configured signup route."""
    return ConsoleNotifier(link_base="/v1" + get_settings().signup_route)


def get_signup_events() -> EventHooks:
    """Get the shared signup event hooks."""
    return _signup_events


def get_signup_service(request: Request) -> SignupService:
    """
    Create signup service with injected dependencies.

    Wires together the repository, notifier, event hooks and the
    immutable signup configuration for the domain service.
    """
    return SignupService(
        repository=get_repository(request),
        notifier=get_notifier(),
        config=get_settings().signup_config(),
        events=get_signup_events(),
    )
