from abc import ABC, abstractmethod
from typing import Optional


class IPasswordHasher(ABC):
    """Slow, salted one-way hashing of credentials"""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hash with a fresh salt"""
        pass

    @abstractmethod
    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """False for a missing or malformed digest"""
        pass

    @abstractmethod
    def dummy_verify(self) -> None:
        """Spend the same time as verify() when there is nothing to check against"""
        pass
