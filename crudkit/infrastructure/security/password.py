"""Password hashing with bcrypt.

Inputs are SHA-256 digested (base64) before bcrypt so passwords longer
than bcrypt's 72-byte limit are not silently truncated.
"""

import base64
import hashlib

import bcrypt


class BcryptPasswordHasher:
    """Hash and verify passwords. rounds is the bcrypt cost factor (4..31)."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    @staticmethod
    def _digest(password: str) -> bytes:
        return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())

    def hash(self, password: str) -> str:
        """Return the bcrypt hash of password as text."""
        hashed = bcrypt.hashpw(self._digest(password), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash; malformed hashes never match."""
        try:
            return bool(bcrypt.checkpw(self._digest(password), password_hash.encode("utf-8")))
        except (ValueError, TypeError):
            return False
