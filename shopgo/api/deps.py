from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from shopgo.application.use_cases.create_payment_intent import CreatePaymentIntentUseCase
from shopgo.application.use_cases.get_me import GetMeUseCase
from shopgo.application.use_cases.get_user_order import GetUserOrderUseCase
from shopgo.application.use_cases.list_user_orders import ListUserOrdersUseCase
from shopgo.application.use_cases.login_local import LoginLocalUseCase
from shopgo.application.use_cases.logout_session import LogoutSessionUseCase
from shopgo.application.use_cases.mark_order_failed import MarkOrderFailedUseCase
from shopgo.application.use_cases.materialize_order_on_success import MaterializeOrderOnSuccessUseCase
from shopgo.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from shopgo.application.use_cases.purge_expired_sessions import PurgeExpiredSessionsUseCase
from shopgo.application.use_cases.refresh_session import RefreshSessionUseCase
from shopgo.application.use_cases.register_user import RegisterUserUseCase
from shopgo.application.use_cases.verify_access_token import VerifyAccessTokenUseCase
from shopgo.domain.exceptions import InvalidTokenError
from shopgo.infrastructure.clients.catalog_client import FakeStoreCatalogClient
from shopgo.infrastructure.clients.stripe_client import StripeClient
from shopgo.infrastructure.db.engine import get_engine
from shopgo.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from shopgo.infrastructure.db.repositories.cart_repository import SqlCartRepository
from shopgo.infrastructure.db.repositories.orders_repository import SqlOrdersRepository
from shopgo.infrastructure.security.password_hasher import PasswordHasher
from shopgo.infrastructure.security.token_service import JwtTokenService
from shopgo.shared.config import get_settings
from shopgo.shared.keyed_lock import KeyedLocks


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn, settings.db_statement_timeout_ms)


@lru_cache(maxsize=1)
def _get_catalog_client() -> FakeStoreCatalogClient:
    settings = get_settings()
    return FakeStoreCatalogClient(
        api_base=settings.catalog_api_base,
        timeout_seconds=settings.catalog_timeout_seconds,
        cache_ttl_seconds=settings.catalog_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def _get_reference_locks() -> KeyedLocks:
    return KeyedLocks()


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


def _get_orders_repository() -> SqlOrdersRepository:
    return SqlOrdersRepository(_get_db_engine())


def _get_cart_repository() -> SqlCartRepository:
    return SqlCartRepository(_get_db_engine(), catalog_port=_get_catalog_client())


@lru_cache(maxsize=1)
def _get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(
        jwt_secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        access_ttl_minutes=settings.jwt_access_ttl_minutes,
        refresh_ttl_days=settings.jwt_refresh_ttl_days,
    )


@lru_cache(maxsize=1)
def _get_stripe_client() -> StripeClient:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is required.")
    if not settings.stripe_webhook_secret:
        raise HTTPException(status_code=500, detail="STRIPE_WEBHOOK_SECRET is required.")
    return StripeClient(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
    )


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(
        auth_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
    )


def get_login_local_use_case() -> LoginLocalUseCase:
    return LoginLocalUseCase(
        auth_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
        token_port=_get_token_service(),
    )


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase(
        auth_port=_get_accounts_repository(),
        password_hasher=_get_password_hasher(),
        token_port=_get_token_service(),
    )


def get_logout_session_use_case() -> LogoutSessionUseCase:
    return LogoutSessionUseCase(auth_port=_get_accounts_repository())


def get_verify_access_token_use_case() -> VerifyAccessTokenUseCase:
    return VerifyAccessTokenUseCase(token_port=_get_token_service())


def get_get_me_use_case() -> GetMeUseCase:
    return GetMeUseCase(auth_port=_get_accounts_repository())


def get_purge_expired_sessions_use_case() -> PurgeExpiredSessionsUseCase:
    return PurgeExpiredSessionsUseCase(auth_port=_get_accounts_repository())


def get_materialize_order_use_case() -> MaterializeOrderOnSuccessUseCase:
    return MaterializeOrderOnSuccessUseCase(
        order_port=_get_orders_repository(),
        cart_port=_get_cart_repository(),
        catalog_port=_get_catalog_client(),
        currency=get_settings().payment_currency,
        reference_locks=_get_reference_locks(),
    )


def get_mark_order_failed_use_case() -> MarkOrderFailedUseCase:
    return MarkOrderFailedUseCase(order_port=_get_orders_repository())


def get_process_stripe_webhook_use_case() -> ProcessStripeWebhookUseCase:
    return ProcessStripeWebhookUseCase(
        stripe_port=_get_stripe_client(),
        materialize_use_case=get_materialize_order_use_case(),
        mark_failed_use_case=get_mark_order_failed_use_case(),
    )


def get_create_payment_intent_use_case() -> CreatePaymentIntentUseCase:
    return CreatePaymentIntentUseCase(
        cart_port=_get_cart_repository(),
        stripe_port=_get_stripe_client(),
        currency=get_settings().payment_currency,
    )


def get_list_user_orders_use_case() -> ListUserOrdersUseCase:
    return ListUserOrdersUseCase(order_port=_get_orders_repository())


def get_get_user_order_use_case() -> GetUserOrderUseCase:
    return GetUserOrderUseCase(order_port=_get_orders_repository())


def get_current_user_id(
    authorization: str | None = Header(default=None),
    use_case: VerifyAccessTokenUseCase = Depends(get_verify_access_token_use_case),
) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = token.strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing access token.")

    try:
        return use_case.execute(token=token)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
