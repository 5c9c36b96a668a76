from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from shopgo.domain.exceptions import InvalidTokenError
from shopgo.infrastructure.security.password_hasher import PasswordHasher
from shopgo.infrastructure.security.token_service import JwtTokenService


SECRET = "test-secret-with-enough-length-for-hs256"


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(jwt_secret=SECRET, access_ttl_minutes=15, refresh_ttl_days=7)


def test_access_token_roundtrip_carries_subject_and_email(token_service):
    now = datetime.now(timezone.utc)

    token, expires_at = token_service.create_access_token(user_id="user-1", now=now, email="a@example.com")
    payload = token_service.decode_access_token(token=token)

    assert payload.user_id == "user-1"
    assert payload.email == "a@example.com"
    assert expires_at == now + timedelta(minutes=15)


def test_expired_token_is_rejected(token_service):
    token, _ = token_service.create_access_token(
        user_id="user-1",
        now=datetime.now(timezone.utc) - timedelta(hours=1),
    )

    with pytest.raises(InvalidTokenError):
        token_service.decode_access_token(token=token)


def test_token_signed_with_other_secret_is_rejected(token_service):
    other = JwtTokenService(jwt_secret="another-secret-with-enough-length-x")
    token, _ = other.create_access_token(user_id="user-1", now=datetime.now(timezone.utc))

    with pytest.raises(InvalidTokenError):
        token_service.decode_access_token(token=token)


def test_unsigned_and_foreign_algorithm_tokens_are_rejected(token_service):
    now = datetime.now(timezone.utc)
    claims = {"sub": "user-1", "type": "access", "exp": int((now + timedelta(minutes=5)).timestamp())}
    unsigned = jwt.encode(claims, None, algorithm="none")
    hs512 = jwt.encode(claims, SECRET, algorithm="HS512")

    for token in (unsigned, hs512):
        with pytest.raises(InvalidTokenError):
            token_service.decode_access_token(token=token)


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "user-1", "type": "refresh"},
        {"sub": "", "type": "access"},
        {"type": "access"},
    ],
)
def test_wrong_type_or_subject_is_rejected(token_service, claims):
    exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
    token = jwt.encode({**claims, "exp": exp}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        token_service.decode_access_token(token=token)


def test_refresh_secret_is_32_random_bytes_hex(token_service):
    first = token_service.generate_refresh_secret()
    second = token_service.generate_refresh_secret()

    assert len(first) == 64
    int(first, 16)
    assert first != second


def test_refresh_expiry_uses_configured_days(token_service):
    now = datetime.now(timezone.utc)

    assert token_service.refresh_expires_at(now=now) == now + timedelta(days=7)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        JwtTokenService(jwt_secret="")


def test_password_hasher_is_salted_and_verifies():
    hasher = PasswordHasher(rounds=4)

    first = hasher.hash("supersecret")
    second = hasher.hash("supersecret")

    assert first != second
    assert first.startswith("$2b$04$")
    assert hasher.verify("supersecret", first)
    assert not hasher.verify("wrong-password", first)
    assert not hasher.verify("supersecret", "not-a-hash")
    assert not hasher.verify("supersecret", "")


def test_password_hasher_rejects_input_longer_than_72_bytes():
    hasher = PasswordHasher(rounds=4)

    stored = hasher.hash("a" * 72)

    assert hasher.verify("a" * 72, stored)
    assert not hasher.verify("a" * 72 + "WRONG", stored)
