from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.notification_repository import NotificationRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy implementation of UnitOfWork pattern.

    Either bound to an existing session (request scope) or given a session
    factory, in which case it opens a session on enter and closes it on exit.
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
    ):
        if session is None and session_factory is None:
            raise ValueError("SqlAlchemyUnitOfWork needs a session or a session factory")
        self.session = session
        self.session_factory = session_factory
        self._owns_session = False

    async def __aenter__(self):
        if self.session is None:
            self.session = self.session_factory()
            self._owns_session = True

        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.notifications = NotificationRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()
        if self._owns_session:
            await self.session.close()
            self.session = None
            self._owns_session = False

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
