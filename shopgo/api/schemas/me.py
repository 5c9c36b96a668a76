from __future__ import annotations

from pydantic import BaseModel

from shopgo.api.schemas.auth import AuthUserResponse


class MeResponse(BaseModel):
    user: AuthUserResponse
