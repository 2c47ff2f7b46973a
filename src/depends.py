from datetime import timedelta
from typing import Callable
from uuid import UUID

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.session_store import SqlSessionStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.session_registry import SessionRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CanonicalRole

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


def build_session_registry(
    uow_factory: Callable[[], UnitOfWork],
    hasher: IPasswordHasher,
    settings: AuthSettings,
) -> SessionRegistry:
    """Wire a registry whose managers persist through the sessions table."""

    def manager_factory(session_id: UUID) -> SessionManager:
        store = SqlSessionStore(
            uow_factory,
            session_id,
            max_idle=timedelta(seconds=settings.idle_timeout_seconds),
        )
        return SessionManager(
            uow_factory, hasher, store, settings, session_id=session_id
        )

    return SessionRegistry(manager_factory)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_auth_settings(request: Request) -> AuthSettings:
    return request.app.state.auth_settings


def get_password_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionManager:
    """
    Dependency resolving the caller's live session from the bearer token.

    Every authenticated request counts as user activity and pushes the idle
    timeout back.

    Raises:
        ClientError: 401 if the token is missing/invalid or the session has
        ended (logout or idle timeout)
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    manager = await registry.get(UUID(payload["session_id"]))
    if manager is None:
        raise ClientError(
            Error("SESSION_EXPIRED", "Session has ended. Please log in again."),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    await manager.touch()
    return manager


async def get_active_session(
    manager: SessionManager = Depends(get_current_session),
) -> SessionManager:
    """Like get_current_session, but a pending password change blocks access."""
    if manager.current.password_change_required:
        raise ClientError(
            Error("PASSWORD_CHANGE_REQUIRED", "Password must be changed before continuing"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return manager


async def require_administrator(
    manager: SessionManager = Depends(get_active_session),
) -> SessionManager:
    if manager.current.role != CanonicalRole.administrator:
        raise ClientError(
            Error("FORBIDDEN", "Administrator role required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return manager
