"""
Notify Use Case

Fans a notification out to users selected by id, role or organization.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CanonicalRole, Notification
from src.domain.roles import resolve
from .dtos import FanOutResponse

logger = logging.getLogger(__name__)


class NotifyUseCase:
    """
    Use case for creating notifications.

    Business Rules:
    - One notification row per distinct recipient
    - Role selection uses the resolved canonical role of active accounts
    - Organization selection picks active organization-role accounts whose
      organization matches case-insensitively
    - No recipients is a success with recipients=0
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _validate(self, title: str, message: str) -> Result[None]:
        if not title or not title.strip() or not message or not message.strip():
            return Return.err(
                Error("VALIDATION_FAILED", "Notification title and message are required")
            )
        return Return.ok(None)

    async def _create(
        self,
        user_ids: Iterable[UUID],
        title: str,
        message: str,
        related_request_id: Optional[UUID],
    ) -> int:
        recipients = list(dict.fromkeys(user_ids))
        if not recipients:
            return 0

        notifications = [
            Notification(
                user_id=user_id,
                title=title,
                message=message,
                related_request_id=related_request_id,
            )
            for user_id in recipients
        ]
        created = await self.uow.notifications.create_many(notifications)
        await self.uow.commit()
        logger.info("Created %s notifications: %s", created, title)
        return created

    async def notify_users(
        self,
        user_ids: List[UUID],
        title: str,
        message: str,
        related_request_id: Optional[UUID] = None,
    ) -> Result[FanOutResponse]:
        validation = self._validate(title, message)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            created = await self._create(user_ids, title, message, related_request_id)
            return Return.ok(FanOutResponse(recipients=created))

    async def notify_roles(
        self,
        roles: List[CanonicalRole],
        title: str,
        message: str,
        related_request_id: Optional[UUID] = None,
    ) -> Result[FanOutResponse]:
        validation = self._validate(title, message)
        if validation.is_err():
            return Return.err(validation.error)

        wanted = set(roles)
        async with self.uow:
            users = await self.uow.users.list(is_active=True)
            user_ids = [u.id for u in users if resolve(u.role, u.legacy_role) in wanted]
            created = await self._create(user_ids, title, message, related_request_id)
            return Return.ok(FanOutResponse(recipients=created))

    async def notify_organization(
        self,
        organization: str,
        title: str,
        message: str,
        related_request_id: Optional[UUID] = None,
    ) -> Result[FanOutResponse]:
        validation = self._validate(title, message)
        if validation.is_err():
            return Return.err(validation.error)
        if not organization or not organization.strip():
            return Return.err(Error("VALIDATION_FAILED", "Organization is required"))

        target = organization.strip().lower()
        async with self.uow:
            users = await self.uow.users.list(is_active=True)
            user_ids = [
                u.id
                for u in users
                if (u.organization or "").strip().lower() == target
                and resolve(u.role, u.legacy_role) == CanonicalRole.organization
            ]
            created = await self._create(user_ids, title, message, related_request_id)
            return Return.ok(FanOutResponse(recipients=created))
