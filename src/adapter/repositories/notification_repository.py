from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.notification_repository import INotificationRepository
from src.domain.entities import Notification


class NotificationRepository(INotificationRepository):
    """Notification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, notifications: List[Notification]) -> int:
        """Insert notifications"""
        self.session.add_all(notifications)
        await self.session.flush()
        return len(notifications)

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID"""
        stmt = select(Notification).where(Notification.id == notification_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_for_user(
        self, user_id: UUID, limit: int = 10, unread_only: bool = False
    ) -> List[Notification]:
        """Newest first"""
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)
        stmt = stmt.order_by(Notification.created_at.desc())
        if limit > 0:
            stmt = stmt.limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_unread(self, user_id: UUID) -> int:
        """Count unread notifications for a user"""
        stmt = select(func.count()).select_from(Notification).where(
            Notification.user_id == user_id, Notification.is_read == False
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def mark_read(self, notification_id: UUID) -> bool:
        """Mark one notification read"""
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id, Notification.is_read == False)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of a user's notifications read"""
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete(self, notification_id: UUID) -> bool:
        """Delete a notification"""
        stmt = delete(Notification).where(Notification.id == notification_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
