"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuthState, CanonicalRole

# Export all entities
from .user import User
from .session import Session
from .notification import Notification
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "AuthState",
    "CanonicalRole",
    # Entities
    "User",
    "Session",
    "Notification",
    "AuditEvent",
]
