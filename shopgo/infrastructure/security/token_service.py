from __future__ import annotations

import secrets
from datetime import datetime, timedelta

import jwt

from shopgo.application.dto.auth import AccessTokenPayload
from shopgo.application.ports.token_port import TokenPort
from shopgo.domain.exceptions import InvalidTokenError


REFRESH_SECRET_BYTES = 32


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        jwt_secret: str,
        access_ttl_minutes: int = 15,
        refresh_ttl_days: int = 7,
        algorithm: str = "HS256",
    ):
        if not jwt_secret:
            raise ValueError("jwt_secret is required.")
        self._jwt_secret = jwt_secret
        self._algorithm = algorithm
        self._access_ttl_minutes = access_ttl_minutes
        self._refresh_ttl_days = refresh_ttl_days

    def create_access_token(
        self,
        *,
        user_id: str,
        now: datetime,
        email: str | None = None,
    ) -> tuple[str, datetime]:
        exp = now + timedelta(minutes=self._access_ttl_minutes)
        payload = {
            "sub": user_id,
            "type": "access",
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        if email:
            payload["email"] = email
        token = jwt.encode(payload, self._jwt_secret, algorithm=self._algorithm)
        return token, exp

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid access token.") from exc

        if payload.get("type") != "access":
            raise InvalidTokenError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidTokenError("Invalid token subject.")

        email = payload.get("email")
        return AccessTokenPayload(user_id=user_id, email=email if isinstance(email, str) else None)

    def generate_refresh_secret(self) -> str:
        return secrets.token_hex(REFRESH_SECRET_BYTES)

    def refresh_expires_at(self, *, now: datetime) -> datetime:
        return now + timedelta(days=self._refresh_ttl_days)
