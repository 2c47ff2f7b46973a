"""
Update Password Use Case

Replaces an account's password and retires any temporary credential.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from .dtos import SessionRecord


class UpdatePasswordUseCase:
    """
    Use case for changing a password.

    Precondition (enforced by the caller, not here): the caller is the account
    owner or an administrator.

    Business Rules:
    - New password must be at least min_password_length characters
    - New password must fit in max_password_bytes once UTF-8 encoded
    - Password is hashed with a fresh salt
    - Temporary password and its expiry are cleared
    - password_change_required is cleared and failed_login_attempts reset
    - updated_at / updated_by are stamped and an audit event recorded
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

    def _validate_password(self, password: str) -> Result[None]:
        if not password or len(password) < self.settings.min_password_length:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Password must be at least {self.settings.min_password_length} "
                    "characters long",
                )
            )
        if len(password.encode()) > self.settings.max_password_bytes:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Password must be at most {self.settings.max_password_bytes} bytes long",
                )
            )
        return Return.ok(None)

    async def execute(
        self, user_id: UUID, new_password: str, actor_id: Optional[UUID] = None
    ) -> Result[SessionRecord]:
        """
        Execute update password use case.

        Args:
            user_id: Account whose password changes
            new_password: New plain text password
            actor_id: Who made the change (defaults to the account itself)

        Returns:
            Result with the refreshed SessionRecord, or Error

        Errors:
            - VALIDATION_FAILED: Password too short
            - ACCOUNT_NOT_FOUND: No such account
        """
        validation = self._validate_password(new_password)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            actor_id = actor_id or user_id

            user.password_hash = self.hasher.hash(new_password)
            user.temp_password_hash = None
            user.temp_password_expires_at = None
            user.password_change_required = False
            user.failed_login_attempts = 0
            user.updated_at = self.clock()
            user.updated_by = actor_id
            user = await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    actor_id=actor_id,
                    action="password_changed",
                    event_metadata={"by_administrator": actor_id != user_id},
                )
            )
            await self.uow.commit()

            return Return.ok(SessionRecord.from_user(user))
