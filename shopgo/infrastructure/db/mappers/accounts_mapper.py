from __future__ import annotations

from typing import Any, Mapping

from shopgo.domain.entities.user import AuthSession, User


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        display_name=row["display_name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_auth_session(row: Mapping[str, Any]) -> AuthSession:
    return AuthSession(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        secret_hash=row["secret_hash"],
        expires_at=row["expires_at"],
        created_at=row["created_at"],
    )
