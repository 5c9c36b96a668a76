from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    email: str
    display_name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    password: str
    display_name: str


@dataclass(frozen=True)
class RegisterUserOutput:
    user: AuthUserOutput


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str


@dataclass(frozen=True)
class LoginOutput:
    user: AuthUserOutput
    access_token: str
    access_expires_at: datetime
    refresh_credential: str
    refresh_expires_at: datetime


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_credential: str


@dataclass(frozen=True)
class AccessTokenOutput:
    access_token: str
    access_expires_at: datetime


@dataclass(frozen=True)
class LogoutInput:
    refresh_credential: str


@dataclass(frozen=True)
class AccessTokenPayload:
    user_id: str
    email: str | None = None
