"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .update_password_use_case import UpdatePasswordUseCase
from .dtos import LoginOutcome, SessionRecord

__all__ = [
    # Use Cases
    "LoginUseCase",
    "UpdatePasswordUseCase",
    # DTOs
    "LoginOutcome",
    "SessionRecord",
]
