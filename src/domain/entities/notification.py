"""
Notification Entity

In-app message addressed to a single user.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Notification(SQLModel, table=True):
    """
    Notification entity - one row per recipient.

    Business Rules:
    - Fan-out creates one row per recipient user
    - is_read only ever flips from False to True
    - related_request_id points at a request owned by the request service
    """

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    title: str = Field(max_length=255)
    message: str
    is_read: bool = Field(default=False)
    related_request_id: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_notification_user_read", "user_id", "is_read"),)
