"""
Login Use Case

Handles credential verification, failed-attempt counting and lockout.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_naive_utc, utcnow
from src.domain.entities import AuditEvent, User
from .dtos import LoginOutcome, SessionRecord

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Constant-time behaviour for unknown usernames (dummy hash check)
    - Unknown username and wrong password give the same INVALID_CREDENTIALS error
    - Inactive accounts get ACCOUNT_INACTIVE and are not counted as a failure
    - A matching, unexpired temporary password logs in with
      password_change_required=True without checking the regular password
    - Each wrong password adds one to failed_login_attempts; reaching
      max_login_attempts deactivates the account (ACCOUNT_LOCKED)
    - Any successful login resets failed_login_attempts and stamps last_login_at
    - Role is resolved on every login and cached on the session record
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: IPasswordHasher,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.hasher = hasher
        self.settings = settings
        self.clock = clock

    async def execute(self, username: str, password: str) -> Result[LoginOutcome]:
        """
        Execute login use case.

        Args:
            username: Login handle
            password: Plain text password candidate

        Returns:
            Result with LoginOutcome, or Error

        Errors:
            - VALIDATION_FAILED: Username or password missing
            - INVALID_CREDENTIALS: Unknown username or wrong password
            - ACCOUNT_INACTIVE: Account exists but is deactivated
            - ACCOUNT_LOCKED: This attempt reached the maximum and locked the account
        """
        if not username or not username.strip() or not password:
            return Return.err(
                Error("VALIDATION_FAILED", "Username and password are required")
            )

        async with self.uow:
            user = await self.uow.users.get_by_username(username.strip())

            if user is None:
                self.hasher.dummy_verify()
                return Return.err(
                    Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE)
                )

            if not user.is_active:
                return Return.err(
                    Error(
                        "ACCOUNT_INACTIVE",
                        "Account is not active. Please contact the administrator.",
                    )
                )

            now = self.clock()

            if self._temporary_password_matches(user, password, now):
                record = await self._complete_login(
                    user, now, password_change_required=True, method="temporary_password"
                )
                return Return.ok(
                    LoginOutcome(record=record, password_change_required=True)
                )

            if not self.hasher.verify(password, user.password_hash):
                return await self._register_failure(user, now)

            record = await self._complete_login(
                user, now, password_change_required=False, method="password"
            )
            return Return.ok(LoginOutcome(record=record))

    def _temporary_password_matches(self, user: User, password: str, now: datetime) -> bool:
        if not user.temp_password_hash or user.temp_password_expires_at is None:
            return False
        # Expiry is exclusive: a credential is dead at its expiry instant
        if as_naive_utc(now) >= as_naive_utc(user.temp_password_expires_at):
            return False
        return self.hasher.verify(password, user.temp_password_hash)

    async def _register_failure(self, user: User, now: datetime) -> Result[LoginOutcome]:
        user = await self.uow.users.increment_failed_attempts(user)
        attempts = user.failed_login_attempts
        max_attempts = self.settings.max_login_attempts

        if self.settings.lockout_enabled and attempts >= max_attempts:
            locked = await self.uow.users.lock(user, now)
            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="account_locked",
                    event_metadata={"failed_login_attempts": attempts},
                )
            )
            await self.uow.commit()

            if locked:
                logger.warning(
                    "Account %s locked after %s failed login attempts", user.id, attempts
                )
            return Return.err(
                Error(
                    "ACCOUNT_LOCKED",
                    "Too many failed login attempts. Account has been locked; "
                    "please contact the administrator.",
                    {"attempts_remaining": 0},
                )
            )

        await self.uow.audit_events.create(
            AuditEvent(
                user_id=user.id,
                action="login_failed",
                event_metadata={"failed_login_attempts": attempts},
            )
        )
        await self.uow.commit()

        details = {}
        if self.settings.lockout_enabled:
            details["attempts_remaining"] = max(0, max_attempts - attempts)
        return Return.err(
            Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE, details)
        )

    async def _complete_login(
        self, user: User, now: datetime, password_change_required: bool, method: str
    ) -> SessionRecord:
        user.failed_login_attempts = 0
        user.last_login_at = now
        user = await self.uow.users.update(user)

        await self.uow.audit_events.create(
            AuditEvent(
                user_id=user.id,
                action="login",
                event_metadata={"username": user.username, "method": method},
            )
        )
        await self.uow.commit()

        return SessionRecord.from_user(
            user, password_change_required=password_change_required
        )
