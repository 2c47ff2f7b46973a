"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class CanonicalRole(str, Enum):
    """Closed set of roles the rest of the system may branch on"""

    administrator = "administrator"
    user = "user"
    organization = "organization"


class AuthState(str, Enum):
    """Lifecycle state of a client session"""

    anonymous = "anonymous"
    authenticated = "authenticated"
    password_change_required = "password_change_required"
    locked = "locked"
