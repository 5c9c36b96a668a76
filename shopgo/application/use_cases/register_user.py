from __future__ import annotations

import logging
from uuid import uuid4

from shopgo.application.dto.auth import RegisterUserInput, RegisterUserOutput
from shopgo.application.ports.auth_port import AuthPort
from shopgo.application.ports.password_hasher_port import PasswordHasherPort
from shopgo.domain.exceptions import DuplicateIdentityError

from .auth_common import MAX_PASSWORD_BYTES, build_auth_user_output, password_too_long, utcnow


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        password_hasher: PasswordHasherPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher

    def execute(self, command: RegisterUserInput) -> RegisterUserOutput:
        display_name = command.display_name.strip()
        email = command.email
        password = command.password

        if not display_name:
            raise ValueError("display_name is required.")
        if not email or not email.strip():
            raise ValueError("email is required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")
        if password_too_long(password):
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes.")

        if self._auth_port.get_user_by_email(email=email) is not None:
            raise DuplicateIdentityError("Email already registered.")

        password_hash = self._password_hasher.hash(password)
        now = utcnow()
        # create_user raises DuplicateIdentityError itself if a concurrent
        # registration wins the unique constraint.
        user = self._auth_port.create_user(
            user_id=str(uuid4()),
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            created_at=now,
            updated_at=now,
        )
        logger.info("register_user: created user_id=%s", user.id)
        return RegisterUserOutput(user=build_auth_user_output(user))
