"""
Account Administration DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import CanonicalRole, User
from src.domain.roles import resolve


class CreateAccountCommand(BaseModel):
    """Validated intent to create an account"""

    username: str
    password: str
    display_name: str = ""
    email: Optional[str] = None
    role: str = CanonicalRole.user.value
    organization: Optional[str] = None


class AccountInfo(BaseModel):
    """Administrator view of an account"""

    id: str
    username: str
    display_name: str
    email: Optional[str] = None
    organization: Optional[str] = None
    role: CanonicalRole
    is_active: bool
    password_change_required: bool
    failed_login_attempts: int
    locked_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "AccountInfo":
        return cls(
            id=str(user.id),
            username=user.username,
            display_name=user.display_name,
            email=user.email,
            organization=user.organization,
            role=resolve(user.role, user.legacy_role),
            is_active=user.is_active,
            password_change_required=user.password_change_required,
            failed_login_attempts=user.failed_login_attempts,
            locked_at=user.locked_at,
            last_login_at=user.last_login_at,
        )


class AccountListResponse(BaseModel):
    accounts: List[AccountInfo]


class TemporaryPasswordResponse(BaseModel):
    """The plaintext is only ever returned here, once"""

    account_id: str
    temporary_password: str
    expires_at: datetime
