"""
Notification DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import Notification


class NotificationInfo(BaseModel):
    id: str
    title: str
    message: str
    is_read: bool
    related_request_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationInfo":
        return cls(
            id=str(notification.id),
            title=notification.title,
            message=notification.message,
            is_read=notification.is_read,
            related_request_id=(
                str(notification.related_request_id)
                if notification.related_request_id
                else None
            ),
            created_at=notification.created_at,
        )


class InboxResponse(BaseModel):
    """
    Notifications plus the unread count, always read back from storage after
    the operation so clients never adjust the count locally.
    """

    notifications: List[NotificationInfo] = []
    unread_count: int


class ReadStateResponse(BaseModel):
    changed: int
    unread_count: int


class FanOutResponse(BaseModel):
    recipients: int
