from __future__ import annotations

from datetime import datetime
from typing import Protocol

from shopgo.application.dto.auth import AccessTokenPayload


class TokenPort(Protocol):
    def create_access_token(
        self,
        *,
        user_id: str,
        now: datetime,
        email: str | None = None,
    ) -> tuple[str, datetime]:
        ...

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        ...

    def generate_refresh_secret(self) -> str:
        ...

    def refresh_expires_at(self, *, now: datetime) -> datetime:
        ...
