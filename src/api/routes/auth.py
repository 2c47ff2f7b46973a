from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.jwt import generate_jwt
from src.app.services.session_manager import SessionManager
from src.app.services.session_registry import SessionRegistry
from src.app.use_cases.auth import SessionRecord
from src.depends import get_auth_settings, get_current_session, get_session_registry
from src.app.services.auth_settings import AuthSettings
from src.domain.entities import AuthState
from src.domain.navigation import dashboard_path

router = APIRouter(prefix="/auth", tags=["Authentication"])

LOGIN_ERROR_STATUS = {
    "VALIDATION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_INACTIVE": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_LOCKED": status.HTTP_423_LOCKED,
}


def raise_for_session_error(error):
    if error.code in LOGIN_ERROR_STATUS:
        raise ClientError(error, status_code=LOGIN_ERROR_STATUS[error.code])
    if error.code == "ACCOUNT_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == "TRANSIENT_FAILURE":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Empty values are rejected by the login use case (VALIDATION_FAILED).
    """

    username: str = Field("", description="Login handle")
    password: str = Field("", description="User password")


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    session: SessionRecord
    password_change_required: bool
    dashboard: str


class SessionResponse(BaseModel):
    session: SessionRecord
    state: AuthState
    idle_timeout_seconds: float


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., description="New password")


class StatusResponse(BaseModel):
    status: str
    detail: Optional[str] = None


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    User Login

    Verifies credentials, applies the lockout policy and opens a session.

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS (details.attempts_remaining for known accounts)
        - 403 Forbidden: ACCOUNT_INACTIVE
        - 423 Locked: ACCOUNT_LOCKED (this attempt triggered the lockout)
        - 422 Unprocessable Entity: VALIDATION_FAILED
        - 503 Service Unavailable: TRANSIENT_FAILURE
    """
    manager = registry.create()
    result = await manager.login(request.username, request.password)

    if result.is_err():
        raise_for_session_error(result.error)

    registry.register(manager)
    record = result.value
    return LoginResponse(
        access_token=generate_jwt(manager.session_id, record.id, record.role.value),
        session=record,
        password_change_required=record.password_change_required,
        dashboard=dashboard_path(record.role),
    )


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def logout(manager: SessionManager = Depends(get_current_session)):
    """Ends the session; the token stops working immediately."""
    await manager.logout()
    return StatusResponse(status="logged_out")


@router.get("/me", status_code=status.HTTP_200_OK, response_model=SessionResponse)
async def me(
    manager: SessionManager = Depends(get_current_session),
    settings: AuthSettings = Depends(get_auth_settings),
):
    return SessionResponse(
        session=manager.current,
        state=manager.state,
        idle_timeout_seconds=settings.idle_timeout_seconds,
    )


@router.post("/activity", status_code=status.HTTP_200_OK, response_model=StatusResponse)
async def activity(manager: SessionManager = Depends(get_current_session)):
    """
    Heartbeat for client-side interaction events (clicks, keys, scrolls).

    Resolving the session already pushed the idle timeout back.
    """
    return StatusResponse(status="active")


@router.post("/password", status_code=status.HTTP_200_OK, response_model=SessionResponse)
async def change_own_password(
    request: ChangePasswordRequest,
    manager: SessionManager = Depends(get_current_session),
    settings: AuthSettings = Depends(get_auth_settings),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Change Own Password

    Required after logging in with a temporary password; clears the
    temporary credential and returns the session to full access.

    Raises:
        - 422 Unprocessable Entity: VALIDATION_FAILED (too short or too long)
        - 503 Service Unavailable: TRANSIENT_FAILURE
    """
    result = await manager.update_password(manager.current.id, request.new_password)
    if result.is_err():
        raise_for_session_error(result.error)

    await registry.apply_password_change(result.value)
    return SessionResponse(
        session=manager.current,
        state=manager.state,
        idle_timeout_seconds=settings.idle_timeout_seconds,
    )
