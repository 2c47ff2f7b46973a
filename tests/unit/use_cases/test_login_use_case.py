from datetime import datetime, timedelta

import pytest

from src.app.services.auth_settings import AuthSettings
from src.app.use_cases.auth.login_use_case import LoginUseCase
from src.domain.entities import CanonicalRole, User

NOW = datetime(2024, 3, 1, 9, 0, 0)


def make_user(**overrides) -> User:
    values = dict(
        username="jdoe",
        display_name="Jane Doe",
        password_hash="hashed:CorrectHorse1",
        role="user",
    )
    values.update(overrides)
    return User(**values)


def increment(user: User) -> User:
    user.failed_login_attempts += 1
    return user


def build(mock_uow, hasher, settings=None) -> LoginUseCase:
    mock_uow.users.increment_failed_attempts.side_effect = increment
    return LoginUseCase(mock_uow, hasher, settings or AuthSettings(), clock=lambda: NOW)


def audit_actions(mock_uow):
    return [call.args[0].action for call in mock_uow.audit_events.create.call_args_list]


@pytest.mark.asyncio
async def test_successful_login(mock_uow, hasher):
    user = make_user(failed_login_attempts=2)
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "CorrectHorse1")

    assert result.is_ok()
    outcome = result.value
    assert outcome.password_change_required is False
    assert outcome.record.username == "jdoe"
    assert outcome.record.role == CanonicalRole.user
    assert user.failed_login_attempts == 0
    assert user.last_login_at == NOW
    assert audit_actions(mock_uow) == ["login"]
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_username_is_trimmed(mock_uow, hasher):
    mock_uow.users.get_by_username.return_value = make_user()

    result = await build(mock_uow, hasher).execute("  jdoe ", "CorrectHorse1")

    assert result.is_ok()
    mock_uow.users.get_by_username.assert_awaited_once_with("jdoe")


@pytest.mark.asyncio
@pytest.mark.parametrize("username,password", [("", "secret"), ("   ", "secret"), ("jdoe", "")])
async def test_missing_fields_fail_validation_without_backend_call(
    mock_uow, hasher, username, password
):
    result = await build(mock_uow, hasher).execute(username, password)

    assert result.is_err()
    assert result.error.code == "VALIDATION_FAILED"
    mock_uow.users.get_by_username.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_username_gives_generic_error(mock_uow, hasher):
    mock_uow.users.get_by_username.return_value = None

    result = await build(mock_uow, hasher).execute("ghost", "whatever1")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.details == {}
    assert hasher.dummy_calls == 1
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_wrong_password_counts_failure(mock_uow, hasher):
    user = make_user(failed_login_attempts=1)
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "nope")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.details == {"attempts_remaining": 3}
    assert user.failed_login_attempts == 2
    assert audit_actions(mock_uow) == ["login_failed"]
    mock_uow.users.lock.assert_not_awaited()


@pytest.mark.asyncio
async def test_fifth_failure_locks_account(mock_uow, hasher):
    user = make_user(failed_login_attempts=4)
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "nope")

    assert result.is_err()
    assert result.error.code == "ACCOUNT_LOCKED"
    assert result.error.details == {"attempts_remaining": 0}
    assert user.failed_login_attempts == 5
    mock_uow.users.lock.assert_awaited_once_with(user, NOW)
    assert audit_actions(mock_uow) == ["account_locked"]
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_lockout_disabled_never_locks(mock_uow, hasher):
    user = make_user(failed_login_attempts=9)
    mock_uow.users.get_by_username.return_value = user
    settings = AuthSettings(lockout_enabled=False)

    result = await build(mock_uow, hasher, settings).execute("jdoe", "nope")

    assert result.error.code == "INVALID_CREDENTIALS"
    assert "attempts_remaining" not in result.error.details
    mock_uow.users.lock.assert_not_awaited()


@pytest.mark.asyncio
async def test_inactive_account_is_rejected_without_counting(mock_uow, hasher):
    user = make_user(is_active=False, failed_login_attempts=5)
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "CorrectHorse1")

    assert result.error.code == "ACCOUNT_INACTIVE"
    mock_uow.users.increment_failed_attempts.assert_not_awaited()
    assert user.failed_login_attempts == 5


@pytest.mark.asyncio
async def test_valid_temporary_password_requires_change(mock_uow, hasher):
    user = make_user(
        temp_password_hash="hashed:abc123",
        temp_password_expires_at=NOW + timedelta(hours=1),
        password_change_required=True,
        failed_login_attempts=3,
    )
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "abc123")

    assert result.is_ok()
    assert result.value.password_change_required is True
    assert result.value.record.password_change_required is True
    assert user.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_expired_temporary_password_is_a_failure(mock_uow, hasher):
    user = make_user(
        temp_password_hash="hashed:abc123",
        temp_password_expires_at=NOW - timedelta(hours=1),
    )
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "abc123")

    assert result.error.code == "INVALID_CREDENTIALS"
    assert user.failed_login_attempts == 1


@pytest.mark.asyncio
async def test_temporary_password_dead_at_expiry_instant(mock_uow, hasher):
    user = make_user(temp_password_hash="hashed:abc123", temp_password_expires_at=NOW)
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "abc123")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_regular_password_still_works_while_temporary_is_pending(mock_uow, hasher):
    user = make_user(
        temp_password_hash="hashed:abc123",
        temp_password_expires_at=NOW + timedelta(hours=1),
        password_change_required=True,
    )
    mock_uow.users.get_by_username.return_value = user

    result = await build(mock_uow, hasher).execute("jdoe", "CorrectHorse1")

    assert result.is_ok()
    assert result.value.password_change_required is False


@pytest.mark.asyncio
async def test_legacy_role_resolved_on_login(mock_uow, hasher):
    mock_uow.users.get_by_username.return_value = make_user(role=None, legacy_role="Admin")

    result = await build(mock_uow, hasher).execute("jdoe", "CorrectHorse1")

    assert result.value.record.role == CanonicalRole.administrator
