from abc import ABC, abstractmethod
from typing import Optional

from src.app.use_cases.auth.dtos import SessionRecord


class ISessionStore(ABC):
    """
    Persistence for a single client session.

    One store instance is scoped to one session; load() after a reload or
    restart returns what the last save() wrote, unless it was cleared or has
    been idle too long.
    """

    @abstractmethod
    async def save(self, record: SessionRecord) -> None:
        pass

    @abstractmethod
    async def load(self) -> Optional[SessionRecord]:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass

    @abstractmethod
    async def touch(self) -> None:
        """Record activity without rewriting the record"""
        pass
