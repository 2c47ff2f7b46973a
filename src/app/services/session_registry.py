"""
Session Registry

Hosts one SessionManager per session id inside a server process.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional
from uuid import UUID, uuid4

from src.app.services.session_manager import SessionManager
from src.app.use_cases.auth import SessionRecord
from src.app.use_cases.users import AccountInfo

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Registry of live session managers.

    - create() hands out a manager bound to a fresh session id
    - get() returns the live manager, or restores it from its store after a
      restart; None if there is nothing (left) to restore
    - Managers leave the registry when their session ends (logout or idle)
    """

    def __init__(self, manager_factory: Callable[[UUID], SessionManager]):
        self._manager_factory = manager_factory
        self._managers: Dict[UUID, SessionManager] = {}
        self._restore_locks: Dict[UUID, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._managers)

    def create(self) -> SessionManager:
        return self._build(uuid4())

    def register(self, manager: SessionManager) -> None:
        """Start tracking a manager once it holds an authenticated session."""
        self._managers[manager.session_id] = manager

    async def get(self, session_id: UUID) -> Optional[SessionManager]:
        manager = self._managers.get(session_id)
        if manager is not None:
            return manager if manager.is_authenticated else None

        # one restore per id; later callers reuse the registered manager
        lock = self._restore_locks.setdefault(session_id, asyncio.Lock())
        try:
            async with lock:
                manager = self._managers.get(session_id)
                if manager is not None:
                    return manager if manager.is_authenticated else None

                manager = self._build(session_id)
                if await manager.restore() is None:
                    return None

                logger.info("Restored session %s", session_id)
                self.register(manager)
                return manager
        finally:
            if not lock.locked():
                self._restore_locks.pop(session_id, None)

    async def apply_account_update(self, account: AccountInfo) -> None:
        for manager in list(self._managers.values()):
            await manager.apply_account_update(account)

    async def apply_password_change(self, record: SessionRecord) -> None:
        for manager in list(self._managers.values()):
            await manager.apply_password_change(record)

    async def end_sessions_for(self, user_id: UUID) -> int:
        ended = 0
        for manager in list(self._managers.values()):
            if manager.current is not None and manager.current.id == user_id:
                await manager.logout()
                ended += 1
        return ended

    async def close(self) -> None:
        """Cancel every idle timer without logging anyone out (process shutdown)."""
        for manager in list(self._managers.values()):
            manager.suspend()
        self._managers.clear()

    def _build(self, session_id: UUID) -> SessionManager:
        manager = self._manager_factory(session_id)
        manager.on_session_end(self._forget)
        return manager

    async def _forget(self, manager: SessionManager, record: SessionRecord) -> None:
        if self._managers.get(manager.session_id) is manager:
            del self._managers[manager.session_id]
            logger.info("Session %s for user %s ended", manager.session_id, record.id)
