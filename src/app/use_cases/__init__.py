"""
Use Cases

Organized into domain folders:
- auth/: Login and password changes
- users/: Account administration
- notifications/: Notification fan-out and inbox
- audit/: Audit logs

Import from subdirectories for better organization.
"""

from .auth import LoginUseCase, UpdatePasswordUseCase
from .users import (
    ChangeRoleUseCase,
    CreateAccountUseCase,
    DeactivateAccountUseCase,
    IssueTemporaryPasswordUseCase,
    ListAccountsUseCase,
    UnlockAccountUseCase,
)
from .notifications import InboxUseCase, NotifyUseCase
from .audit import GetAuditEventsUseCase

__all__ = [
    # Auth
    "LoginUseCase",
    "UpdatePasswordUseCase",
    # Users
    "ChangeRoleUseCase",
    "CreateAccountUseCase",
    "DeactivateAccountUseCase",
    "IssueTemporaryPasswordUseCase",
    "ListAccountsUseCase",
    "UnlockAccountUseCase",
    # Notifications
    "InboxUseCase",
    "NotifyUseCase",
    # Audit
    "GetAuditEventsUseCase",
]
