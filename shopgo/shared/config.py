from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    db_statement_timeout_ms: int
    db_auto_create: bool
    jwt_secret: str
    jwt_algorithm: str
    jwt_access_ttl_minutes: int
    jwt_refresh_ttl_days: int
    bcrypt_rounds: int
    refresh_cookie_secure: bool
    stripe_secret_key: str
    stripe_webhook_secret: str
    payment_currency: str
    catalog_api_base: str
    catalog_timeout_seconds: float
    catalog_cache_ttl_seconds: float
    cors_allowed_origins: tuple[str, ...]
    session_sweep_interval_seconds: float
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        db_statement_timeout_ms=int(_env("DB_STATEMENT_TIMEOUT_MS", "5000")),
        db_auto_create=_bool("DB_AUTO_CREATE", False),
        jwt_secret=_env("JWT_SECRET", ""),
        jwt_algorithm=_env("JWT_ALGORITHM", "HS256"),
        jwt_access_ttl_minutes=int(_env("JWT_ACCESS_TTL_MINUTES", "15")),
        jwt_refresh_ttl_days=int(_env("JWT_REFRESH_TTL_DAYS", "7")),
        bcrypt_rounds=int(_env("BCRYPT_ROUNDS", "12")),
        refresh_cookie_secure=_bool("REFRESH_COOKIE_SECURE", True),
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET", ""),
        payment_currency=(_env("PAYMENT_CURRENCY", "usd") or "usd").lower(),
        catalog_api_base=_env("CATALOG_API_BASE", "https://fakestoreapi.com"),
        catalog_timeout_seconds=float(_env("CATALOG_TIMEOUT_SECONDS", "10")),
        catalog_cache_ttl_seconds=float(_env("CATALOG_CACHE_TTL_SECONDS", "300")),
        cors_allowed_origins=_csv("CORS_ALLOWED_ORIGINS", "http://localhost:5173"),
        session_sweep_interval_seconds=float(_env("SESSION_SWEEP_INTERVAL_SECONDS", "3600")),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
