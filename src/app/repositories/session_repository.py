from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Persisted session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Insert or replace a session"""
        pass

    @abstractmethod
    async def touch(self, session_id: UUID, at: datetime) -> bool:
        """Stamp last activity. Returns True if the session exists."""
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session. Returns True if it existed."""
        pass
