"""
Session Entity

Persisted copy of an authenticated client session.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - survives reloads and process restarts.

    Business Rules:
    - id is the session id carried in the access token
    - payload is the serialized session record (never contains hashes)
    - updated_at is the last activity; rows idle past the timeout are discarded
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    payload: dict = Field(default_factory=dict, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_updated_at", "updated_at"),)
