from typing import Optional

import bcrypt

from src.app.services.password_hasher import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt with a configurable cost factor (12 in production)"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(plaintext.encode(), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        if not plaintext or not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode(), digest.encode())
        except ValueError:
            # Malformed hash in storage
            return False

    def dummy_verify(self) -> None:
        bcrypt.checkpw(b"not_the_password", self._dummy_hash)
