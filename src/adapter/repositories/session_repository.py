from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Persisted session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, session_obj: Session) -> Session:
        """Insert or replace a session"""
        existing = await self.get_by_id(session_obj.id)
        if existing is not None:
            existing.user_id = session_obj.user_id
            existing.payload = session_obj.payload
            existing.updated_at = session_obj.updated_at
            session_obj = existing

        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def touch(self, session_id: UUID, at: datetime) -> bool:
        """Stamp last activity"""
        stmt = (
            update(Session)
            .where(Session.id == session_id)
            .values(updated_at=at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete(self, session_id: UUID) -> bool:
        """Delete a session"""
        stmt = delete(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
