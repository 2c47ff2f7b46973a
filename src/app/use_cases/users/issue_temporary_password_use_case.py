"""
Issue Temporary Password Use Case

Administrator-issued, time-limited credential that forces a password change.
"""

import secrets
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from .dtos import TemporaryPasswordResponse


class IssueTemporaryPasswordUseCase:
    """
    Use case for issuing a temporary password.

    Business Rules:
    - Credential is cryptographically random and stored only as a bcrypt hash
    - Expires temp_password_ttl_hours after issue
    - Sets password_change_required
    - Does not reactivate a locked account (unlock is a separate action)
    - Issuing again replaces the previous temporary password
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

    async def execute(
        self, user_id: UUID, actor_id: UUID
    ) -> Result[TemporaryPasswordResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            temporary_password = secrets.token_urlsafe(9)
            now = self.clock()
            expires_at = now + timedelta(hours=self.settings.temp_password_ttl_hours)

            user.temp_password_hash = self.hasher.hash(temporary_password)
            user.temp_password_expires_at = expires_at
            user.password_change_required = True
            user.updated_at = now
            user.updated_by = actor_id
            user = await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    actor_id=actor_id,
                    action="temporary_password_issued",
                    event_metadata={"expires_at": expires_at.isoformat()},
                )
            )
            await self.uow.commit()

            return Return.ok(
                TemporaryPasswordResponse(
                    account_id=str(user.id),
                    temporary_password=temporary_password,
                    expires_at=expires_at,
                )
            )
