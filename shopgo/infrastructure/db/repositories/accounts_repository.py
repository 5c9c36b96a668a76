from __future__ import annotations

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from shopgo.application.ports.auth_port import AuthPort
from shopgo.domain.exceptions import DuplicateIdentityError
from shopgo.infrastructure.db.engine import translate_db_errors
from shopgo.infrastructure.db.mappers.accounts_mapper import map_row_to_auth_session, map_row_to_user


_USER_COLUMNS = "id, email, password_hash, display_name, created_at, updated_at"
_SESSION_COLUMNS = "id, user_id, secret_hash, expires_at, created_at"


class SqlAccountsRepository(AuthPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with translate_db_errors("get_user_by_id"):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM public.users
            WHERE email = :email
            LIMIT 1
        """
        with translate_db_errors("get_user_by_email"):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"email": email}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        password_hash: str,
        display_name: str,
        created_at: datetime,
        updated_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.users (
                id, email, password_hash, display_name, created_at, updated_at
            ) VALUES (
                :id, :email, :password_hash, :display_name, :created_at, :updated_at
            )
            RETURNING {_USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "email": email,
            "password_hash": password_hash,
            "display_name": display_name,
            "created_at": created_at,
            "updated_at": updated_at,
        }
        with translate_db_errors("create_user"):
            try:
                with self._engine.begin() as conn:
                    row = conn.execute(text(sql), params).mappings().one()
            except IntegrityError as exc:
                raise DuplicateIdentityError("Email already registered.") from exc
        return map_row_to_user(row)

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        secret_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.auth_sessions (
                id, user_id, secret_hash, expires_at, created_at
            ) VALUES (
                :id, :user_id, :secret_hash, :expires_at, :created_at
            )
            RETURNING {_SESSION_COLUMNS}
        """
        params = {
            "id": session_id,
            "user_id": user_id,
            "secret_hash": secret_hash,
            "expires_at": expires_at,
            "created_at": created_at,
        }
        with translate_db_errors("create_session"):
            with self._engine.begin() as conn:
                row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_auth_session(row)

    def get_session_by_id(self, *, session_id: str):
        sql = f"""
            SELECT {_SESSION_COLUMNS}
            FROM public.auth_sessions
            WHERE id = :session_id
            LIMIT 1
        """
        with translate_db_errors("get_session_by_id"):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"session_id": session_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_auth_session(row)

    def delete_session(self, *, session_id: str) -> None:
        sql = """
            DELETE FROM public.auth_sessions
            WHERE id = :session_id
        """
        with translate_db_errors("delete_session"):
            with self._engine.begin() as conn:
                conn.execute(text(sql), {"session_id": session_id})

    def delete_expired_sessions(self, *, now: datetime) -> int:
        sql = """
            DELETE FROM public.auth_sessions
            WHERE expires_at <= :now
        """
        with translate_db_errors("delete_expired_sessions"):
            with self._engine.begin() as conn:
                result = conn.execute(text(sql), {"now": now})
        return int(result.rowcount or 0)
