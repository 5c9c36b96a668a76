from __future__ import annotations

import logging

from shopgo.application.ports.auth_port import AuthPort

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class PurgeExpiredSessionsUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self) -> int:
        deleted = self._auth_port.delete_expired_sessions(now=utcnow())
        if deleted:
            logger.info("purge_expired_sessions: deleted=%s", deleted)
        return deleted
