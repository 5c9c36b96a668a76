from __future__ import annotations

from shopgo.application.dto.auth import AuthUserOutput
from shopgo.application.ports.auth_port import AuthPort
from shopgo.domain.exceptions import NotFoundError

from .auth_common import build_auth_user_output


class GetMeUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> AuthUserOutput:
        user = self._auth_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return build_auth_user_output(user)
