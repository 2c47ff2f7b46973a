"""
Account Administration API Routes

Administrator-only account management: creation, unlock, deactivation,
role changes and password resets.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.routes.auth import raise_for_session_error
from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.session_registry import SessionRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    AccountInfo,
    AccountListResponse,
    ChangeRoleUseCase,
    CreateAccountCommand,
    CreateAccountUseCase,
    DeactivateAccountUseCase,
    IssueTemporaryPasswordUseCase,
    ListAccountsUseCase,
    TemporaryPasswordResponse,
)
from src.depends import (
    get_auth_settings,
    get_password_hasher,
    get_session_registry,
    get_unit_of_work,
    require_administrator,
)
from src.domain.entities import CanonicalRole

router = APIRouter(prefix="/users", tags=["Users"])

ERROR_STATUS = {
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USERNAME_TAKEN": status.HTTP_409_CONFLICT,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "CANNOT_DEMOTE_SELF": status.HTTP_403_FORBIDDEN,
    "CANNOT_DEACTIVATE_SELF": status.HTTP_403_FORBIDDEN,
}


def raise_for_error(error):
    if error.code in ERROR_STATUS:
        raise ClientError(error, status_code=ERROR_STATUS[error.code])
    raise ServerError(error)


class CreateAccountRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Login handle")
    password: str = Field(..., description="Initial password")
    display_name: str = ""
    email: Optional[str] = None
    role: str = Field(CanonicalRole.user.value, description="administrator, user or organization")
    organization: Optional[str] = None


class ChangeRoleRequest(BaseModel):
    new_role: str = Field(..., description="administrator, user or organization")


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(..., description="New password for the account")


@router.get("", status_code=status.HTTP_200_OK, response_model=AccountListResponse)
async def list_accounts(
    role: Optional[CanonicalRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListAccountsUseCase(uow).execute(role=role, is_active=is_active)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AccountInfo)
async def create_account(
    request: CreateAccountRequest,
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Create Account

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 409 Conflict: USERNAME_TAKEN
        - 422 Unprocessable Entity: VALIDATION_FAILED (password too short or too long)
    """
    use_case = CreateAccountUseCase(uow, hasher, settings)
    result = await use_case.execute(
        CreateAccountCommand(**request.model_dump()), actor_id=admin.current.id
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{user_id}/unlock", status_code=status.HTTP_200_OK, response_model=AccountInfo)
async def unlock_account(
    user_id: UUID,
    admin: SessionManager = Depends(require_administrator),
):
    """
    Unlock Account

    Reactivates a locked account and resets its failed-attempt counter.
    Unlocking an account that is not locked succeeds without changes.
    """
    result = await admin.unlock_account(user_id, actor_id=admin.current.id)
    if result.is_err():
        raise_for_session_error(result.error)
    return result.value


@router.post(
    "/{user_id}/deactivate", status_code=status.HTTP_200_OK, response_model=AccountInfo
)
async def deactivate_account(
    user_id: UUID,
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Deactivate an account and end its live sessions."""
    result = await DeactivateAccountUseCase(uow).execute(user_id, actor_id=admin.current.id)
    if result.is_err():
        raise_for_error(result.error)

    await registry.end_sessions_for(user_id)
    return result.value


@router.put("/{user_id}/role", status_code=status.HTTP_200_OK, response_model=AccountInfo)
async def change_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Change Account Role

    Live sessions of the account pick up the new role immediately.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: CANNOT_DEMOTE_SELF
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = ChangeRoleUseCase(uow)
    result = await use_case.execute(admin.current.id, user_id, request.new_role)
    if result.is_err():
        raise_for_error(result.error)

    await registry.apply_account_update(result.value)
    return result.value


@router.post(
    "/{user_id}/temporary-password",
    status_code=status.HTTP_201_CREATED,
    response_model=TemporaryPasswordResponse,
)
async def issue_temporary_password(
    user_id: UUID,
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Issue Temporary Password

    The plaintext is returned once and never stored. Logging in with it
    forces a password change.
    """
    use_case = IssueTemporaryPasswordUseCase(uow, hasher, settings)
    result = await use_case.execute(user_id, actor_id=admin.current.id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{user_id}/password", status_code=status.HTTP_200_OK)
async def reset_password(
    user_id: UUID,
    request: ResetPasswordRequest,
    admin: SessionManager = Depends(require_administrator),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Reset Password

    Live sessions of the account leave the password-change gate.

    Raises:
        - 404 Not Found: ACCOUNT_NOT_FOUND
        - 422 Unprocessable Entity: VALIDATION_FAILED (password too short or too long)
        - 503 Service Unavailable: TRANSIENT_FAILURE
    """
    result = await admin.update_password(
        user_id, request.new_password, actor_id=admin.current.id
    )
    if result.is_err():
        raise_for_session_error(result.error)

    await registry.apply_password_change(result.value)
    return {"status": "password_updated", "user_id": str(user_id)}
