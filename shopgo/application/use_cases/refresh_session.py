from __future__ import annotations

from shopgo.application.dto.auth import AccessTokenOutput, RefreshSessionInput
from shopgo.application.ports.auth_port import AuthPort
from shopgo.application.ports.password_hasher_port import PasswordHasherPort
from shopgo.application.ports.token_port import TokenPort
from shopgo.domain.entities.refresh_credential import RefreshCredential
from shopgo.domain.exceptions import InvalidSessionError, SessionExpiredError

from .auth_common import utcnow


class RefreshSessionUseCase:
    """Exchange a refresh credential for a new access token.

    The stored secret is neither rotated nor extended: the credential stays
    valid until its session expires or is logged out.
    """

    def __init__(
        self,
        *,
        auth_port: AuthPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AccessTokenOutput:
        credential = RefreshCredential.parse(command.refresh_credential)

        session = self._auth_port.get_session_by_id(session_id=credential.session_id)
        if session is None:
            raise InvalidSessionError("Invalid refresh session.")

        now = utcnow()
        if session.is_expired(now):
            raise SessionExpiredError("Refresh session expired.")

        if not self._password_hasher.verify(credential.secret, session.secret_hash):
            raise InvalidSessionError("Invalid refresh session.")

        access_token, access_expires_at = self._token_port.create_access_token(
            user_id=session.user_id,
            now=now,
        )
        return AccessTokenOutput(access_token=access_token, access_expires_at=access_expires_at)
