"""
Audit API Routes

Handles audit event retrieval endpoints.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.api.error import ServerError
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import GetAuditEventsUseCase
from src.depends import get_unit_of_work, require_administrator

router = APIRouter(prefix="/audit", tags=["Audit"])


class AuditEventResponse(BaseModel):
    """Single audit event in response"""

    action: str
    username: Optional[str]
    actor_id: Optional[str]
    timestamp: str
    metadata: Dict[str, Any]


class AuditEventsResponse(BaseModel):
    """GET /audit/events response payload"""

    events: List[AuditEventResponse]
    next_cursor: Optional[str]


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventsResponse,
)
async def get_audit_events(
    admin: SessionManager = Depends(require_administrator),
    uow: UnitOfWork = Depends(get_unit_of_work),
    user_id: Optional[UUID] = Query(None, description="Only events about this account"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Get Account Audit Events

    Logins, failed logins, lockouts, unlocks and administrator account
    changes, newest first. Administrators only.

    Raises:
        - 401 Unauthorized: No live session
        - 403 Forbidden: Not an administrator
        - 500 Internal Server Error: Server error
    """
    use_case = GetAuditEventsUseCase(uow)
    result = await use_case.execute(user_id=user_id, limit=limit, cursor=cursor)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
