import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.auth_settings import AuthSettings


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_username = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.list = AsyncMock(return_value=[])
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.increment_failed_attempts = AsyncMock()
    uow.users.lock = AsyncMock(return_value=True)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.save = AsyncMock()
    uow.sessions.touch = AsyncMock()
    uow.sessions.delete = AsyncMock()

    uow.notifications = MagicMock()
    uow.notifications.create_many = AsyncMock(side_effect=lambda items: len(items))
    uow.notifications.get_by_id = AsyncMock(return_value=None)
    uow.notifications.list_for_user = AsyncMock(return_value=[])
    uow.notifications.count_unread = AsyncMock(return_value=0)
    uow.notifications.mark_read = AsyncMock(return_value=True)
    uow.notifications.mark_all_read = AsyncMock(return_value=0)
    uow.notifications.delete = AsyncMock(return_value=True)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    uow.audit_events.get_paginated = AsyncMock(return_value=([], None))
    return uow


class FakeHasher:
    """Reversible stand-in for bcrypt so unit tests stay fast"""

    def __init__(self):
        self.dummy_calls = 0

    def hash(self, plaintext: str) -> str:
        return f"hashed:{plaintext}"

    def verify(self, plaintext, digest) -> bool:
        return bool(plaintext) and digest == f"hashed:{plaintext}"

    def dummy_verify(self) -> None:
        self.dummy_calls += 1


@pytest.fixture
def hasher():
    return FakeHasher()


@pytest.fixture
def settings():
    return AuthSettings(max_login_attempts=5, idle_timeout_seconds=300)
