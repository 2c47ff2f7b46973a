from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from src.app.services.auth_settings import AuthSettings
from src.app.use_cases.auth.update_password_use_case import UpdatePasswordUseCase
from src.domain.entities import User

NOW = datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
def user():
    return User(
        username="jdoe",
        password_hash="hashed:OldPassword1",
        temp_password_hash="hashed:abc123",
        temp_password_expires_at=NOW + timedelta(hours=2),
        password_change_required=True,
        failed_login_attempts=3,
    )


def build(mock_uow, hasher):
    return UpdatePasswordUseCase(mock_uow, hasher, AuthSettings(), clock=lambda: NOW)


@pytest.mark.asyncio
async def test_update_clears_temporary_credential(mock_uow, hasher, user):
    mock_uow.users.get_by_id.return_value = user

    result = await build(mock_uow, hasher).execute(user.id, "NewPassword1")

    assert result.is_ok()
    assert user.password_hash == "hashed:NewPassword1"
    assert user.temp_password_hash is None
    assert user.temp_password_expires_at is None
    assert user.password_change_required is False
    assert user.failed_login_attempts == 0
    assert user.updated_at == NOW
    assert user.updated_by == user.id
    assert result.value.password_change_required is False

    event = mock_uow.audit_events.create.call_args.args[0]
    assert event.action == "password_changed"
    assert event.event_metadata == {"by_administrator": False}
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_administrator_reset_records_actor(mock_uow, hasher, user):
    mock_uow.users.get_by_id.return_value = user
    admin_id = uuid4()

    result = await build(mock_uow, hasher).execute(user.id, "NewPassword1", actor_id=admin_id)

    assert result.is_ok()
    assert user.updated_by == admin_id
    event = mock_uow.audit_events.create.call_args.args[0]
    assert event.actor_id == admin_id
    assert event.event_metadata == {"by_administrator": True}


@pytest.mark.asyncio
async def test_short_password_rejected(mock_uow, hasher, user):
    result = await build(mock_uow, hasher).execute(user.id, "short")

    assert result.error.code == "VALIDATION_FAILED"
    mock_uow.users.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_password_over_bcrypt_limit_rejected(mock_uow, hasher, user):
    # 40 characters, 80 bytes
    result = await build(mock_uow, hasher).execute(user.id, "\u00e9" * 40)

    assert result.error.code == "VALIDATION_FAILED"
    mock_uow.users.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_password_at_byte_limit_accepted(mock_uow, hasher, user):
    mock_uow.users.get_by_id.return_value = user

    result = await build(mock_uow, hasher).execute(user.id, "x" * 72)

    assert result.is_ok()


@pytest.mark.asyncio
async def test_unknown_account(mock_uow, hasher):
    mock_uow.users.get_by_id.return_value = None

    result = await build(mock_uow, hasher).execute(uuid4(), "NewPassword1")

    assert result.error.code == "ACCOUNT_NOT_FOUND"
    mock_uow.commit.assert_not_awaited()
