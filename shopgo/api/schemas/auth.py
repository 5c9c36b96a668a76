from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    display_name: str = Field(..., max_length=120)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class AuthUserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    created_at: datetime
    updated_at: datetime


class RegisterResponse(BaseModel):
    user: AuthUserResponse


class AuthTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    refresh_expires_at: datetime
    user: AuthUserResponse


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    access_expires_at: datetime


class LogoutResponse(BaseModel):
    ok: bool
