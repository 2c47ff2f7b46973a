from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Notification


class INotificationRepository(ABC):
    """Notification repository interface - application layer"""

    @abstractmethod
    async def create_many(self, notifications: List[Notification]) -> int:
        """Insert notifications. Returns count inserted."""
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID"""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, limit: int = 10, unread_only: bool = False
    ) -> List[Notification]:
        """Newest first; limit <= 0 means no limit"""
        pass

    @abstractmethod
    async def count_unread(self, user_id: UUID) -> int:
        """Count unread notifications for a user"""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: UUID) -> bool:
        """Mark one notification read. Returns True if it was unread."""
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of a user's notifications read. Returns count changed."""
        pass

    @abstractmethod
    async def delete(self, notification_id: UUID) -> bool:
        """Delete a notification. Returns True if it existed."""
        pass
