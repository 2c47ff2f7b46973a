"""
Deactivate Account Use Case
"""

from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent
from .dtos import AccountInfo


class DeactivateAccountUseCase:
    """
    Use case for an administrator deactivating an account.

    Business Rules:
    - Administrators cannot deactivate themselves
    - locked_at is not stamped (this is not a lockout)
    - Live sessions of the account are ended by the caller
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, user_id: UUID, actor_id: UUID) -> Result[AccountInfo]:
        if user_id == actor_id:
            return Return.err(
                Error("CANNOT_DEACTIVATE_SELF", "Administrators cannot deactivate themselves")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if not user.is_active:
                return Return.ok(AccountInfo.from_user(user))

            user.is_active = False
            user.updated_at = self.clock()
            user.updated_by = actor_id
            user = await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, actor_id=actor_id, action="account_deactivated")
            )
            await self.uow.commit()

            return Return.ok(AccountInfo.from_user(user))
