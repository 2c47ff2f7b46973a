"""
User Entity

Represents an account that can sign in to the document request tracker.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - an administrator, staff member or organization account.

    Business Rules:
    - Username must be unique across all users
    - Password stored as bcrypt hash, never in clear
    - Temporary password (admin issued) is also a bcrypt hash and only
      honored strictly before temp_password_expires_at
    - failed_login_attempts resets on every successful login
    - Reaching the configured maximum deactivates the account and stamps locked_at
    - role is the canonical role column; legacy_role holds free text from
      older records and is only ever read through the role resolver
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=150)
    display_name: str = Field(default="", max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)

    # Administrator-issued temporary credential
    temp_password_hash: Optional[str] = Field(default=None, max_length=60)
    temp_password_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    password_change_required: bool = Field(default=False)

    role: Optional[str] = Field(default=None, max_length=50)
    legacy_role: Optional[str] = Field(default=None, max_length=100)
    organization: Optional[str] = Field(default=None, max_length=255)

    # Lockout
    is_active: bool = Field(default=True)
    failed_login_attempts: int = Field(default=0)
    locked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    updated_by: Optional[UUID] = Field(default=None)
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_is_active", "is_active"),)
