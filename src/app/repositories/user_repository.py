from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by login handle"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def list(self, is_active: Optional[bool] = None) -> List[User]:
        """List users ordered by username, optionally filtered by active flag"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def increment_failed_attempts(self, user: User) -> User:
        """Atomically add one to failed_login_attempts and return the refreshed user"""
        pass

    @abstractmethod
    async def lock(self, user: User, locked_at: datetime) -> bool:
        """Deactivate the user if still active. Returns True if this call locked it."""
        pass
