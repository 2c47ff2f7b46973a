"""
Change User Role Use Case

Handles an administrator changing an account's canonical role.
"""

from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, CanonicalRole
from src.domain.roles import resolve
from .dtos import AccountInfo


class ChangeRoleUseCase:
    """
    Use case for changing an account's role.

    Business Rules:
    - Validate role is one of the canonical roles
    - Administrator cannot demote themselves
    - Writes the modern role column; legacy_role is left as history
    - Creates audit event for compliance tracking
    - Live sessions of the account pick up the new role (done by the caller)
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, actor_id: UUID, target_user_id: UUID, new_role: str
    ) -> Result[AccountInfo]:
        """
        Execute change role use case.

        Args:
            actor_id: Administrator making the change
            target_user_id: Account whose role is being changed
            new_role: New role to assign (administrator/user/organization)

        Returns:
            Result with the updated account, or Error
        """
        try:
            role = CanonicalRole(new_role.strip().lower())
        except (ValueError, AttributeError):
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {new_role}. Must be one of: "
                    "administrator, user, organization",
                )
            )

        if actor_id == target_user_id and role != CanonicalRole.administrator:
            return Return.err(
                Error("CANNOT_DEMOTE_SELF", "Administrators cannot demote themselves")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            # Store old role for audit
            old_role = resolve(user.role, user.legacy_role)

            user.role = role.value
            user.updated_at = self.clock()
            user.updated_by = actor_id
            user = await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    actor_id=actor_id,
                    action="role_changed",
                    event_metadata={"old_role": old_role.value, "new_role": role.value},
                )
            )
            await self.uow.commit()

            return Return.ok(AccountInfo.from_user(user))
