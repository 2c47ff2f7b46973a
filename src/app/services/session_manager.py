"""
Session Manager

Owns one client's authenticated-user record, its persistence and its idle
timeout. All state changes go through this object.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.auth_settings import AuthSettings
from src.app.services.idle_timer import IdleTimer
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.session_store import ISessionStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import LoginUseCase, SessionRecord, UpdatePasswordUseCase
from src.app.use_cases.users import AccountInfo, UnlockAccountUseCase
from src.domain.base import utcnow
from src.domain.entities import AuthState

logger = logging.getLogger(__name__)

TRANSIENT_FAILURE = Error(
    "TRANSIENT_FAILURE", "Something went wrong. Please try again."
)

LOCKED_ERROR_CODES = ("ACCOUNT_INACTIVE", "ACCOUNT_LOCKED")

SessionEndListener = Callable[["SessionManager", SessionRecord], Awaitable[None]]


class SessionManager:
    """
    Session/auth lifecycle for a single client.

    States: anonymous -> authenticated | password_change_required | locked.

    - login() calls are serialized; a second call waits for the first
    - Backend errors never change state and surface as TRANSIENT_FAILURE
    - At most one idle timer is pending; expiry logs out exactly once
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        hasher: IPasswordHasher,
        store: ISessionStore,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
        session_id: Optional[UUID] = None,
    ):
        self.session_id = session_id
        self._uow_factory = uow_factory
        self._hasher = hasher
        self._store = store
        self._settings = settings
        self._clock = clock

        self._current: Optional[SessionRecord] = None
        self._state = AuthState.anonymous
        self._locked_account: Optional[str] = None
        self._login_lock = asyncio.Lock()
        self._idle_timer = IdleTimer(settings.idle_timeout_seconds, self._expire)
        self._end_listeners: List[SessionEndListener] = []

    @property
    def current(self) -> Optional[SessionRecord]:
        return self._current

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    @property
    def idle_timer_pending(self) -> bool:
        return self._idle_timer.pending

    def on_session_end(self, listener: SessionEndListener) -> None:
        self._end_listeners.append(listener)

    async def login(self, username: str, password: str) -> Result[SessionRecord]:
        async with self._login_lock:
            use_case = LoginUseCase(
                self._uow_factory(), self._hasher, self._settings, self._clock
            )
            try:
                result = await use_case.execute(username, password)
            except Exception:
                logger.exception("Login failed for %r due to a backend error", username)
                return Return.err(TRANSIENT_FAILURE)

            if result.is_err():
                if result.error.code in LOCKED_ERROR_CODES:
                    await self._drop_session()
                    self._state = AuthState.locked
                    self._locked_account = username.strip()
                return result

            outcome = result.value
            try:
                await self._store.save(outcome.record)
            except Exception:
                logger.exception("Could not persist session for %s", outcome.record.id)
                return Return.err(TRANSIENT_FAILURE)

            self._current = outcome.record
            self._locked_account = None
            self._state = (
                AuthState.password_change_required
                if outcome.password_change_required
                else AuthState.authenticated
            )
            self._idle_timer.reset()
            logger.info("User %s logged in (%s)", outcome.record.id, self._state.value)
            return Return.ok(outcome.record)

    async def update_password(
        self, user_id: UUID, new_password: str, actor_id: Optional[UUID] = None
    ) -> Result[SessionRecord]:
        """
        Change a password. The caller must already have checked that the
        requester is the account owner or an administrator.
        """
        use_case = UpdatePasswordUseCase(
            self._uow_factory(), self._hasher, self._settings, self._clock
        )
        try:
            result = await use_case.execute(user_id, new_password, actor_id)
        except Exception:
            logger.exception("Password update failed for %s due to a backend error", user_id)
            return Return.err(TRANSIENT_FAILURE)

        if result.is_err():
            return result

        if self._current is not None and self._current.id == user_id:
            record = result.value
            try:
                await self._store.save(record)
            except Exception:
                logger.exception("Could not persist session for %s", user_id)
                return Return.err(TRANSIENT_FAILURE)
            self._current = record
            self._state = AuthState.authenticated
            self._idle_timer.reset()

        return result

    async def unlock_account(
        self, user_id: UUID, actor_id: Optional[UUID] = None
    ) -> Result[AccountInfo]:
        use_case = UnlockAccountUseCase(self._uow_factory(), self._clock)
        try:
            result = await use_case.execute(user_id, actor_id)
        except Exception:
            logger.exception("Unlock failed for %s due to a backend error", user_id)
            return Return.err(TRANSIENT_FAILURE)

        if (
            result.is_ok()
            and self._state == AuthState.locked
            and self._locked_account == result.value.username
        ):
            self._state = AuthState.anonymous
            self._locked_account = None
        return result

    async def logout(self) -> None:
        """Idempotent; listeners hear about each real session end once."""
        await self._end_session()
        self._state = AuthState.anonymous

    def suspend(self) -> None:
        """Stop the idle timer but keep the persisted session for restore()."""
        self._idle_timer.cancel()

    async def touch(self) -> None:
        """Register user activity. Ignored while not authenticated."""
        if self._current is None:
            return
        self._idle_timer.reset()
        try:
            await self._store.touch()
        except Exception:
            logger.exception("Could not record activity for session %s", self.session_id)

    async def restore(self) -> Optional[SessionRecord]:
        """
        Reload a persisted session after a reload or restart. Inactive records
        are cleared instead of restored.
        """
        try:
            record = await self._store.load()
        except Exception:
            logger.exception("Could not load session %s", self.session_id)
            return None

        if record is None:
            return None
        if not record.is_active:
            await self._store.clear()
            return None

        self._current = record
        self._state = (
            AuthState.password_change_required
            if record.password_change_required
            else AuthState.authenticated
        )
        self._idle_timer.reset()
        return record

    async def apply_account_update(self, account: AccountInfo) -> None:
        """Push an administrator's change to this session if it is the same account."""
        if self._current is None or str(self._current.id) != account.id:
            return
        if not account.is_active:
            await self.logout()
            return

        record = self._current.model_copy(
            update={
                "role": account.role,
                "display_name": account.display_name,
                "email": account.email,
                "organization": account.organization,
            }
        )
        await self._store.save(record)
        self._current = record

    async def apply_password_change(self, record: SessionRecord) -> None:
        """Adopt a password change made outside this session for the same account."""
        if self._current is None or self._current.id != record.id:
            return

        await self._store.save(record)
        self._current = record
        self._state = AuthState.authenticated

    async def _expire(self) -> None:
        if self._current is None:
            return
        logger.info("Session %s expired after inactivity", self.session_id)
        await self.logout()

    async def _drop_session(self) -> Optional[SessionRecord]:
        self._idle_timer.cancel()
        previous, self._current = self._current, None
        try:
            await self._store.clear()
        except Exception:
            logger.exception("Could not clear session %s", self.session_id)
        return previous

    async def _end_session(self) -> None:
        previous = await self._drop_session()
        if previous is None:
            return
        for listener in list(self._end_listeners):
            await listener(self, previous)
