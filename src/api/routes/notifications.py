"""
Notification API Routes

Inbox endpoints for the logged-in user, plus the service-to-service
fan-out endpoint used when requests are created, assigned or completed.
Every inbox response carries the unread count as stored.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.notifications import (
    FanOutResponse,
    InboxResponse,
    InboxUseCase,
    NotifyUseCase,
    ReadStateResponse,
)
from src.depends import get_active_session, get_unit_of_work
from src.domain.entities import CanonicalRole

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def raise_for_error(error):
    if error.code == "NOTIFICATION_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == "VALIDATION_FAILED":
        raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    raise ServerError(error)


class FanOutRequest(BaseModel):
    """
    Exactly one audience selector must be given: user_ids, roles or
    organization.
    """

    title: str
    message: str
    related_request_id: Optional[UUID] = None
    user_ids: Optional[List[UUID]] = None
    roles: Optional[List[CanonicalRole]] = None
    organization: Optional[str] = Field(None, description="Organization name")


@router.get("", status_code=status.HTTP_200_OK, response_model=InboxResponse)
async def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    unread_only: bool = Query(False),
    manager: SessionManager = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await InboxUseCase(uow, manager.current.id).list(
        limit=limit, unread_only=unread_only
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/unread-count", status_code=status.HTTP_200_OK, response_model=InboxResponse)
async def unread_count(
    manager: SessionManager = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await InboxUseCase(uow, manager.current.id).unread_count()
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/read-all", status_code=status.HTTP_200_OK, response_model=ReadStateResponse
)
async def mark_all_read(
    manager: SessionManager = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await InboxUseCase(uow, manager.current.id).mark_all_read()
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/{notification_id}/read",
    status_code=status.HTTP_200_OK,
    response_model=ReadStateResponse,
)
async def mark_read(
    notification_id: UUID,
    manager: SessionManager = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Marking an already-read notification succeeds with changed=0."""
    result = await InboxUseCase(uow, manager.current.id).mark_read(notification_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_200_OK,
    response_model=ReadStateResponse,
)
async def delete_notification(
    notification_id: UUID,
    manager: SessionManager = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await InboxUseCase(uow, manager.current.id).delete(notification_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/fan-out",
    status_code=status.HTTP_201_CREATED,
    response_model=FanOutResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def fan_out(
    request: FanOutRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Fan-out Notification

    Service-to-service (X-Admin-API-Key). Creates one notification per
    distinct recipient.

    Raises:
        - 401 Unauthorized: Missing or invalid API key
        - 422 Unprocessable Entity: VALIDATION_FAILED
    """
    selectors = [
        request.user_ids is not None,
        request.roles is not None,
        request.organization is not None,
    ]
    if sum(selectors) != 1:
        raise ClientError(
            Error(
                "VALIDATION_FAILED",
                "Exactly one of user_ids, roles or organization is required",
            ),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    use_case = NotifyUseCase(uow)
    if request.user_ids is not None:
        result = await use_case.notify_users(
            request.user_ids, request.title, request.message, request.related_request_id
        )
    elif request.roles is not None:
        result = await use_case.notify_roles(
            request.roles, request.title, request.message, request.related_request_id
        )
    else:
        result = await use_case.notify_organization(
            request.organization, request.title, request.message, request.related_request_id
        )

    if result.is_err():
        raise_for_error(result.error)
    return result.value
