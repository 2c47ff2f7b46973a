"""
Unlock Account Use Case

Administrative reactivation of a locked or deactivated account.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from .dtos import AccountInfo


class UnlockAccountUseCase:
    """
    Use case for unlocking an account.

    Business Rules:
    - Sets is_active, zeroes failed_login_attempts, clears locked_at
    - Unlocking an already active account is a no-op success
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, user_id: UUID, actor_id: Optional[UUID] = None
    ) -> Result[AccountInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if user.is_active and user.failed_login_attempts == 0 and user.locked_at is None:
                return Return.ok(AccountInfo.from_user(user))

            previous_attempts = user.failed_login_attempts
            user.is_active = True
            user.failed_login_attempts = 0
            user.locked_at = None
            user.updated_at = self.clock()
            user.updated_by = actor_id
            user = await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    actor_id=actor_id,
                    action="account_unlocked",
                    event_metadata={"previous_failed_login_attempts": previous_attempts},
                )
            )
            await self.uow.commit()

            return Return.ok(AccountInfo.from_user(user))
