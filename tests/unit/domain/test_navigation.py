import pytest

from src.domain.entities import CanonicalRole
from src.domain.navigation import (
    Feature,
    UNAUTHORIZED_PATH,
    allowed_paths,
    can_access,
    dashboard_path,
    has_feature,
    navigation_for,
)


def test_administrator_sees_management_sections():
    names = [item.name for item in navigation_for(CanonicalRole.administrator)]
    assert "User Management" in names
    assert "Reports" in names


def test_organization_navigation_is_limited():
    paths = allowed_paths(CanonicalRole.organization)
    assert "/orgdashboard" in paths
    assert "/organization-profile" in paths
    assert "/user-management" not in paths


def test_children_are_accessible():
    assert can_access(CanonicalRole.administrator, "/request-analytics")
    assert can_access(CanonicalRole.user, "/requests?filter=assigned")


@pytest.mark.parametrize(
    "role,path",
    [
        (CanonicalRole.user, "/user-management"),
        (CanonicalRole.organization, "/admindashboard"),
        (CanonicalRole.administrator, "/not-a-page"),
        (None, "/requests"),
        (CanonicalRole.user, ""),
        (CanonicalRole.user, None),
    ],
)
def test_access_is_fail_closed(role, path):
    assert can_access(role, path) is False


def test_dashboards():
    assert dashboard_path(CanonicalRole.administrator) == "/admindashboard"
    assert dashboard_path(CanonicalRole.user) == "/userdashboard"
    assert dashboard_path(CanonicalRole.organization) == "/orgdashboard"
    assert dashboard_path(None) == UNAUTHORIZED_PATH


def test_feature_gates():
    assert has_feature(CanonicalRole.administrator, Feature.manage_users)
    assert not has_feature(CanonicalRole.user, Feature.manage_users)
    assert has_feature(CanonicalRole.organization, Feature.submit_requests)
    assert not has_feature(None, Feature.manage_requests)
