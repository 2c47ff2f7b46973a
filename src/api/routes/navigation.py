from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.app.services.session_manager import SessionManager
from src.depends import get_active_session
from src.domain.entities import CanonicalRole
from src.domain.navigation import (
    UNAUTHORIZED_PATH,
    Feature,
    NavItem,
    can_access,
    dashboard_path,
    has_feature,
    navigation_for,
)

router = APIRouter(prefix="/navigation", tags=["Navigation"])


class NavigationResponse(BaseModel):
    role: CanonicalRole
    dashboard: str
    items: List[NavItem]
    features: List[str]


class AccessResponse(BaseModel):
    path: str
    allowed: bool
    redirect: Optional[str] = None


@router.get("", status_code=status.HTTP_200_OK, response_model=NavigationResponse)
async def get_navigation(manager: SessionManager = Depends(get_active_session)):
    """Navigation tree and feature flags for the caller's role."""
    role = manager.current.role
    return NavigationResponse(
        role=role,
        dashboard=dashboard_path(role),
        items=navigation_for(role),
        features=sorted(feature.value for feature in Feature if has_feature(role, feature)),
    )


@router.get("/access", status_code=status.HTTP_200_OK, response_model=AccessResponse)
async def check_access(
    path: str = Query(..., description="Route the client is about to show"),
    manager: SessionManager = Depends(get_active_session),
):
    """Fail-closed route check; denied routes come back with the redirect target."""
    allowed = can_access(manager.current.role, path)
    return AccessResponse(
        path=path,
        allowed=allowed,
        redirect=None if allowed else UNAUTHORIZED_PATH,
    )
