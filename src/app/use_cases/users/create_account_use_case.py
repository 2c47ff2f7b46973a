"""
Create Account Use Case
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, CanonicalRole, User
from .dtos import AccountInfo, CreateAccountCommand


class CreateAccountUseCase:
    """
    Use case for an administrator creating an account.

    Business Rules:
    - Username must be unique
    - Role must be one of the canonical roles
    - Password must meet the minimum length
    - Password must fit in max_password_bytes once UTF-8 encoded
    """

    def __init__(self, uow: UnitOfWork, hasher: IPasswordHasher, settings: AuthSettings):
        self.uow = uow
        self.hasher = hasher
        self.settings = settings

    async def execute(
        self, command: CreateAccountCommand, actor_id: Optional[UUID] = None
    ) -> Result[AccountInfo]:
        try:
            role = CanonicalRole(command.role.strip().lower())
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {command.role}. Must be one of: "
                    "administrator, user, organization",
                )
            )

        if len(command.password) < self.settings.min_password_length:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Password must be at least {self.settings.min_password_length} "
                    "characters long",
                )
            )

        if len(command.password.encode()) > self.settings.max_password_bytes:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Password must be at most {self.settings.max_password_bytes} bytes long",
                )
            )

        username = command.username.strip()

        async with self.uow:
            if await self.uow.users.get_by_username(username):
                return Return.err(Error("USERNAME_TAKEN", "Username already exists"))

            user = User(
                username=username,
                display_name=command.display_name or username,
                email=command.email,
                password_hash=self.hasher.hash(command.password),
                role=role.value,
                organization=command.organization,
                updated_by=actor_id,
            )
            user = await self.uow.users.create(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    actor_id=actor_id,
                    action="account_created",
                    event_metadata={"username": username, "role": role.value},
                )
            )
            await self.uow.commit()

            return Return.ok(AccountInfo.from_user(user))
