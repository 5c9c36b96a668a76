from __future__ import annotations

import logging

from shopgo.application.dto.auth import LogoutInput
from shopgo.application.ports.auth_port import AuthPort
from shopgo.domain.entities.refresh_credential import RefreshCredential
from shopgo.domain.exceptions import MalformedCredentialError


logger = logging.getLogger(__name__)


class LogoutSessionUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: LogoutInput) -> None:
        try:
            credential = RefreshCredential.parse(command.refresh_credential)
        except MalformedCredentialError:
            logger.info("logout_session: malformed credential ignored")
            return
        # Deleting an already-removed session is a no-op.
        self._auth_port.delete_session(session_id=credential.session_id)
        logger.info("logout_session: session_id=%s", credential.session_id)
