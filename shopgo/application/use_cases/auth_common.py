from __future__ import annotations

from datetime import datetime, timezone

from shopgo.application.dto.auth import AuthUserOutput
from shopgo.domain.entities.user import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES
