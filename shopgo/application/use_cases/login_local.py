from __future__ import annotations

import logging
from uuid import uuid4

from shopgo.application.dto.auth import LoginLocalInput, LoginOutput
from shopgo.application.ports.auth_port import AuthPort
from shopgo.application.ports.password_hasher_port import PasswordHasherPort
from shopgo.application.ports.token_port import TokenPort
from shopgo.domain.entities.refresh_credential import RefreshCredential
from shopgo.domain.exceptions import InvalidCredentialsError

from .auth_common import build_auth_user_output, password_too_long, utcnow


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
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

    def execute(self, command: LoginLocalInput) -> LoginOutput:
        user = self._auth_port.get_user_by_email(email=command.email)
        if user is None:
            raise InvalidCredentialsError("Invalid credentials.")

        if password_too_long(command.password):
            raise InvalidCredentialsError("Invalid credentials.")
        if not self._password_hasher.verify(command.password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials.")

        now = utcnow()
        access_token, access_expires_at = self._token_port.create_access_token(
            user_id=user.id,
            now=now,
            email=user.email,
        )

        secret = self._token_port.generate_refresh_secret()
        refresh_expires_at = self._token_port.refresh_expires_at(now=now)
        session = self._auth_port.create_session(
            session_id=str(uuid4()),
            user_id=user.id,
            secret_hash=self._password_hasher.hash(secret),
            expires_at=refresh_expires_at,
            created_at=now,
        )
        logger.info("login_local: session_created user_id=%s session_id=%s", user.id, session.id)

        return LoginOutput(
            user=build_auth_user_output(user),
            access_token=access_token,
            access_expires_at=access_expires_at,
            refresh_credential=RefreshCredential(session_id=session.id, secret=secret).format(),
            refresh_expires_at=session.expires_at,
        )
