from __future__ import annotations

from shopgo.application.ports.token_port import TokenPort
from shopgo.domain.exceptions import InvalidTokenError


class VerifyAccessTokenUseCase:
    def __init__(self, *, token_port: TokenPort):
        self._token_port = token_port

    def execute(self, *, token: str) -> str:
        if not token or not token.strip():
            raise InvalidTokenError("Missing access token.")
        payload = self._token_port.decode_access_token(token=token.strip())
        return payload.user_id
