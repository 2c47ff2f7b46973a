from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by login handle"""
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(self, is_active: Optional[bool] = None) -> List[User]:
        """List users ordered by username, optionally filtered by active flag"""
        stmt = select(User)
        if is_active is not None:
            stmt = stmt.where(User.is_active == is_active)
        stmt = stmt.order_by(User.username)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def increment_failed_attempts(self, user: User) -> User:
        """
        Add one to the counter in SQL rather than in Python so concurrent
        attempts against the same account cannot lose an increment.
        """
        stmt = (
            update(User)
            .where(User.id == user.id)
            .values(failed_login_attempts=User.failed_login_attempts + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def lock(self, user: User, locked_at: datetime) -> bool:
        """Deactivate the user if still active"""
        stmt = (
            update(User)
            .where(User.id == user.id, User.is_active == True)
            .values(is_active=False, locked_at=locked_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        await self.session.refresh(user)
        return result.rowcount > 0
