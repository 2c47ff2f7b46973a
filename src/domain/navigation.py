"""
Navigation and feature access per canonical role.

The tables below are static configuration; every check is fail-closed.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel

from .entities.enums import CanonicalRole


class NavItem(BaseModel):
    name: str
    path: str = ""
    children: Tuple["NavItem", ...] = ()


NavItem.model_rebuild()


class Feature(str, Enum):
    manage_users = "manage_users"
    manage_organizations = "manage_organizations"
    view_reports = "view_reports"
    manage_requests = "manage_requests"
    submit_requests = "submit_requests"
    view_organization_profile = "view_organization_profile"


_REQUEST_VIEWS = (
    NavItem(name="All Requests", path="/requests"),
    NavItem(name="Pending Requests", path="/requests?status=pending"),
    NavItem(name="Completed Requests", path="/requests?status=completed"),
)

ROLE_NAVIGATION: Dict[CanonicalRole, Tuple[NavItem, ...]] = {
    CanonicalRole.administrator: (
        NavItem(name="Dashboard", path="/admindashboard"),
        NavItem(name="Requests", path="/requests", children=_REQUEST_VIEWS),
        NavItem(
            name="Reports",
            path="/reports",
            children=(
                NavItem(name="Request Analytics", path="/request-analytics"),
                NavItem(name="Request Reports", path="/reports/requests"),
            ),
        ),
        NavItem(
            name="Dashboards",
            children=(
                NavItem(name="Organization Dashboard", path="/orgdashboard"),
                NavItem(name="User Dashboard", path="/userdashboard"),
            ),
        ),
        NavItem(name="User Management", path="/user-management"),
        NavItem(
            name="Organizations",
            path="/organizations",
            children=(
                NavItem(name="Organization List", path="/organizations"),
                NavItem(name="Organization Users", path="/organization-users"),
            ),
        ),
    ),
    CanonicalRole.user: (
        NavItem(name="Dashboard", path="/userdashboard"),
        NavItem(
            name="Requests",
            path="/requests",
            children=_REQUEST_VIEWS
            + (NavItem(name="Upload Response", path="/requests?filter=assigned"),),
        ),
    ),
    CanonicalRole.organization: (
        NavItem(name="Dashboard", path="/orgdashboard"),
        NavItem(name="My Requests", path="/requests", children=_REQUEST_VIEWS),
        NavItem(name="Organization", path="/organization-profile"),
        NavItem(name="Contact Support", path="/contact"),
    ),
}

ROLE_DASHBOARD: Dict[CanonicalRole, str] = {
    CanonicalRole.administrator: "/admindashboard",
    CanonicalRole.user: "/userdashboard",
    CanonicalRole.organization: "/orgdashboard",
}

UNAUTHORIZED_PATH = "/unauthorized"

ROLE_FEATURES: Dict[CanonicalRole, FrozenSet[Feature]] = {
    CanonicalRole.administrator: frozenset(
        {
            Feature.manage_users,
            Feature.manage_organizations,
            Feature.view_reports,
            Feature.manage_requests,
        }
    ),
    CanonicalRole.user: frozenset({Feature.manage_requests}),
    CanonicalRole.organization: frozenset(
        {Feature.submit_requests, Feature.view_organization_profile}
    ),
}


def navigation_for(role: Optional[CanonicalRole]) -> List[NavItem]:
    return list(ROLE_NAVIGATION.get(role, ()))


def allowed_paths(role: Optional[CanonicalRole]) -> FrozenSet[str]:
    paths = set()
    for item in ROLE_NAVIGATION.get(role, ()):
        if item.path:
            paths.add(item.path)
        paths.update(child.path for child in item.children if child.path)
    return frozenset(paths)


def can_access(role: Optional[CanonicalRole], path: Optional[str]) -> bool:
    """True only when path is listed for role; unknown roles and paths are denied."""
    if role is None or not path:
        return False
    return path in allowed_paths(role)


def dashboard_path(role: Optional[CanonicalRole]) -> str:
    return ROLE_DASHBOARD.get(role, UNAUTHORIZED_PATH)


def has_feature(role: Optional[CanonicalRole], feature: Feature) -> bool:
    return feature in ROLE_FEATURES.get(role, frozenset())
