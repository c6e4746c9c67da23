from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_service import ResetTokenService
from src.app.services.session_issuer import SessionIssuer
from tests.fixtures.in_memory_store import InMemoryUnitOfWork, RecordingMailSender

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with the user repository"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.update_password_hash = AsyncMock()
    uow.users.set_reset_token = AsyncMock()
    uow.users.clear_reset_token = AsyncMock()
    uow.users.get_by_valid_reset_token_hash = AsyncMock(return_value=None)
    uow.users.delete = AsyncMock(return_value=True)

    return uow


@pytest.fixture(scope="session")
def hasher():
    # Lowest cost bcrypt accepts; keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock():
    """Settable clock: assign clock.now to move time"""

    class Clock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def token_service(clock):
    return ResetTokenService(clock=clock)


@pytest.fixture
def session_issuer():
    return SessionIssuer("test-secret")


@pytest.fixture
def memory_uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def mail_sender():
    return RecordingMailSender()
