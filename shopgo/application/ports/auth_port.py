from __future__ import annotations

from datetime import datetime
from typing import Protocol

from shopgo.domain.entities.user import AuthSession, User


class AuthPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        password_hash: str,
        display_name: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> User:
        ...

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        secret_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> AuthSession:
        ...

    def get_session_by_id(self, *, session_id: str) -> AuthSession | None:
        ...

    def delete_session(self, *, session_id: str) -> None:
        ...

    def delete_expired_sessions(self, *, now: datetime) -> int:
        ...
