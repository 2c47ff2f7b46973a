import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from pydantic import ValidationError

from src.app.services.session_store import ISessionStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import SessionRecord
from src.domain.base import utcnow
from src.domain.entities import Session

logger = logging.getLogger(__name__)


class SqlSessionStore(ISessionStore):
    """
    Session store backed by the sessions table, one row per session id.

    A row whose last activity is older than max_idle is treated as absent and
    deleted on load, so a session cannot outlive its idle window across a restart.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        session_id: UUID,
        max_idle: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow_factory = uow_factory
        self.session_id = session_id
        self.max_idle = max_idle
        self.clock = clock

    async def save(self, record: SessionRecord) -> None:
        async with self.uow_factory() as uow:
            await uow.sessions.save(
                Session(
                    id=self.session_id,
                    user_id=record.id,
                    payload=record.model_dump(mode="json"),
                    updated_at=self.clock(),
                )
            )
            await uow.commit()

    async def load(self) -> Optional[SessionRecord]:
        async with self.uow_factory() as uow:
            row = await uow.sessions.get_by_id(self.session_id)
            if row is None:
                return None

            if row.updated_at + self.max_idle <= self.clock():
                logger.info("Discarding idle session %s", self.session_id)
                await uow.sessions.delete(self.session_id)
                await uow.commit()
                return None

            try:
                return SessionRecord.model_validate(row.payload)
            except ValidationError:
                logger.warning("Discarding unreadable session %s", self.session_id)
                await uow.sessions.delete(self.session_id)
                await uow.commit()
                return None

    async def clear(self) -> None:
        async with self.uow_factory() as uow:
            await uow.sessions.delete(self.session_id)
            await uow.commit()

    async def touch(self) -> None:
        async with self.uow_factory() as uow:
            await uow.sessions.touch(self.session_id, self.clock())
            await uow.commit()


class MemorySessionStore(ISessionStore):
    """In-process store for embedded clients and tests"""

    def __init__(self):
        self.record: Optional[SessionRecord] = None
        self.last_activity: Optional[datetime] = None
        self.saves = 0
        self.clears = 0

    async def save(self, record: SessionRecord) -> None:
        self.record = record
        self.last_activity = utcnow()
        self.saves += 1

    async def load(self) -> Optional[SessionRecord]:
        return self.record

    async def clear(self) -> None:
        self.record = None
        self.last_activity = None
        self.clears += 1

    async def touch(self) -> None:
        if self.record is not None:
            self.last_activity = utcnow()
