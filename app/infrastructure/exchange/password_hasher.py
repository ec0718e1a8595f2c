"""
Adapter: password hashing.

Implements PasswordHasher port with passlib.
"""

from passlib.context import CryptContext

from app.domain.exchange.ports import PasswordHasher


class PasslibPasswordHasher(PasswordHasher):
    """PBKDF2-SHA256 hashing through a passlib CryptContext."""

    def __init__(self, schemes: list[str] | None = None) -> None:
        self._context = CryptContext(
            schemes=schemes or ["pbkdf2_sha256"], deprecated="auto"
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognised or malformed hash.
            return False
