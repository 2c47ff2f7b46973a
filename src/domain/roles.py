"""
Role Resolver

Maps stored role values, including free text from older records, onto the
closed set of canonical roles.
"""

from typing import Dict, Optional

from .entities.enums import CanonicalRole

DEFAULT_ROLE = CanonicalRole.user

# Keys are lower-case; lookups strip and lower-case the stored value.
LEGACY_ROLE_MAP: Dict[str, CanonicalRole] = {
    "administrator": CanonicalRole.administrator,
    "admin": CanonicalRole.administrator,
    "user": CanonicalRole.user,
    "supervisor": CanonicalRole.user,
    "processor": CanonicalRole.user,
    "organization": CanonicalRole.organization,
    "org": CanonicalRole.organization,
}


def _normalize(value: Optional[str]) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def resolve(stored_role: Optional[str], legacy_role: Optional[str] = None) -> CanonicalRole:
    """
    Resolve the canonical role of an account.

    Args:
        stored_role: Value of the modern role column (may be empty)
        legacy_role: Free-text role from older records

    Returns:
        Exactly one CanonicalRole; unrecognized input falls back to user
    """
    modern = _normalize(stored_role)
    if modern:
        try:
            return CanonicalRole(modern)
        except ValueError:
            pass

    legacy = _normalize(legacy_role) or modern
    return LEGACY_ROLE_MAP.get(legacy, DEFAULT_ROLE)
