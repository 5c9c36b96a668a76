from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from shopgo.domain.exceptions import MalformedCredentialError


SEPARATOR = ":"


@dataclass(frozen=True)
class RefreshCredential:
    """Opaque `<session_id>:<secret>` value handed to the client once at login."""

    session_id: str
    secret: str

    def format(self) -> str:
        return f"{self.session_id}{SEPARATOR}{self.secret}"

    @classmethod
    def parse(cls, value: str) -> RefreshCredential:
        session_id, sep, secret = (value or "").partition(SEPARATOR)
        if not sep or not session_id or not secret:
            raise MalformedCredentialError("Malformed refresh credential.")
        try:
            UUID(session_id)
        except ValueError as exc:
            raise MalformedCredentialError("Malformed refresh credential.") from exc
        return cls(session_id=session_id, secret=secret)
