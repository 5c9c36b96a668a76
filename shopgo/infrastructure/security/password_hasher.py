from __future__ import annotations

from passlib.context import CryptContext

from shopgo.application.ports.password_hasher_port import PasswordHasherPort


DEFAULT_BCRYPT_ROUNDS = 12
MAX_BCRYPT_BYTES = 72


class PasswordHasher(PasswordHasherPort):
    """bcrypt via passlib; used for account passwords and refresh secrets alike."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self._ctx = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        if len(plain_password.encode("utf-8")) > MAX_BCRYPT_BYTES:
            return False
        try:
            return self._ctx.verify(plain_password, password_hash)
        except ValueError:
            # Unrecognised or corrupt stored hash.
            return False
