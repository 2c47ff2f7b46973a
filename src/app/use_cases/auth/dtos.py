"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import CanonicalRole, User
from src.domain.roles import resolve


class SessionRecord(BaseModel):
    """
    Authenticated-user record held by a session.

    The role is resolved once when the record is built and cached here.
    Credential hashes are never copied onto the record.
    """

    id: UUID
    username: str
    display_name: str = ""
    email: Optional[str] = None
    organization: Optional[str] = None
    role: CanonicalRole = CanonicalRole.user
    is_active: bool = True
    password_change_required: bool = False
    failed_login_attempts: int = 0
    locked_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User, password_change_required: bool = False) -> "SessionRecord":
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            email=user.email,
            organization=user.organization,
            role=resolve(user.role, user.legacy_role),
            is_active=user.is_active,
            password_change_required=password_change_required,
            failed_login_attempts=user.failed_login_attempts,
            locked_at=user.locked_at,
            last_login_at=user.last_login_at,
        )


class LoginOutcome(BaseModel):
    """Response for user login use case"""

    record: SessionRecord
    password_change_required: bool = False
