"""
AuditEvent Entity

Immutable log of all authentication/authorization events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of all authentication/authorization events.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id is the account the event is about
    - actor_id is the administrator who acted (None for self-service events)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    actor_id: Optional[UUID] = Field(default=None)

    action: str = Field(max_length=100)  # e.g., "login", "account_locked"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_user_action", "user_id", "action"),
    )
