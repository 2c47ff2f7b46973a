"""
Account Administration Use Cases
"""

from .change_role_use_case import ChangeRoleUseCase
from .create_account_use_case import CreateAccountUseCase
from .deactivate_account_use_case import DeactivateAccountUseCase
from .issue_temporary_password_use_case import IssueTemporaryPasswordUseCase
from .list_accounts_use_case import ListAccountsUseCase
from .unlock_account_use_case import UnlockAccountUseCase
from .dtos import (
    AccountInfo,
    AccountListResponse,
    CreateAccountCommand,
    TemporaryPasswordResponse,
)

__all__ = [
    # Use Cases
    "ChangeRoleUseCase",
    "CreateAccountUseCase",
    "DeactivateAccountUseCase",
    "IssueTemporaryPasswordUseCase",
    "ListAccountsUseCase",
    "UnlockAccountUseCase",
    # DTOs
    "AccountInfo",
    "AccountListResponse",
    "CreateAccountCommand",
    "TemporaryPasswordResponse",
]
