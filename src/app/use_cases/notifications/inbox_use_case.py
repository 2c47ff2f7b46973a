"""
Inbox Use Case

A user's notifications and their read state.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import InboxResponse, NotificationInfo, ReadStateResponse


class InboxUseCase:
    """
    Use case for reading and updating one user's notifications.

    Business Rules:
    - Every response carries unread_count counted from storage after the change
    - Marking an already-read notification changes nothing (changed=0)
    - Another user's notification is reported as NOTIFICATION_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork, user_id: UUID):
        self.uow = uow
        self.user_id = user_id

    async def _owned(self, notification_id: UUID):
        notification = await self.uow.notifications.get_by_id(notification_id)
        if notification is None or notification.user_id != self.user_id:
            return None
        return notification

    async def list(self, limit: int = 10, unread_only: bool = False) -> Result[InboxResponse]:
        async with self.uow:
            notifications = await self.uow.notifications.list_for_user(
                self.user_id, limit=limit, unread_only=unread_only
            )
            unread_count = await self.uow.notifications.count_unread(self.user_id)
            return Return.ok(
                InboxResponse(
                    notifications=[NotificationInfo.from_entity(n) for n in notifications],
                    unread_count=unread_count,
                )
            )

    async def unread_count(self) -> Result[InboxResponse]:
        async with self.uow:
            unread_count = await self.uow.notifications.count_unread(self.user_id)
            return Return.ok(InboxResponse(unread_count=unread_count))

    async def mark_read(self, notification_id: UUID) -> Result[ReadStateResponse]:
        async with self.uow:
            if await self._owned(notification_id) is None:
                return Return.err(
                    Error("NOTIFICATION_NOT_FOUND", "Notification not found")
                )

            changed = await self.uow.notifications.mark_read(notification_id)
            await self.uow.commit()
            unread_count = await self.uow.notifications.count_unread(self.user_id)
            return Return.ok(
                ReadStateResponse(changed=int(changed), unread_count=unread_count)
            )

    async def mark_all_read(self) -> Result[ReadStateResponse]:
        async with self.uow:
            changed = await self.uow.notifications.mark_all_read(self.user_id)
            await self.uow.commit()
            unread_count = await self.uow.notifications.count_unread(self.user_id)
            return Return.ok(ReadStateResponse(changed=changed, unread_count=unread_count))

    async def delete(self, notification_id: UUID) -> Result[ReadStateResponse]:
        async with self.uow:
            if await self._owned(notification_id) is None:
                return Return.err(
                    Error("NOTIFICATION_NOT_FOUND", "Notification not found")
                )

            deleted = await self.uow.notifications.delete(notification_id)
            await self.uow.commit()
            unread_count = await self.uow.notifications.count_unread(self.user_id)
            return Return.ok(
                ReadStateResponse(changed=int(deleted), unread_count=unread_count)
            )
