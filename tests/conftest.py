"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for expiry boundaries
- In-memory repository and mock notifier
- A wired SignupService using both
"""

from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.config import SignupConfig
from src.domain.events import EventHooks
from src.domain.signup import SignupService
from tests.helpers import TOKEN_LIFETIME, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> SignupConfig:
    """Signup config with the cheapest bcrypt cost to keep tests fast."""
    return SignupConfig(token_lifetime=TOKEN_LIFETIME, bcrypt_cost=4)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def events() -> EventHooks:
    return EventHooks()


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    notifier: Mock,
    config: SignupConfig,
    events: EventHooks,
    clock: FakeClock,
) -> SignupService:
    return SignupService(
        repository=repository,
        notifier=notifier,
        config=config,
        events=events,
        clock=clock,
    )
