from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response

from shopgo.api.deps import (
    get_login_local_use_case,
    get_logout_session_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
)
from shopgo.api.schemas.auth import (
    AuthTokenResponse,
    LoginRequest,
    LogoutResponse,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
)
from shopgo.application.dto.auth import (
    LoginLocalInput,
    LogoutInput,
    RefreshSessionInput,
    RegisterUserInput,
)
from shopgo.application.use_cases.login_local import LoginLocalUseCase
from shopgo.application.use_cases.logout_session import LogoutSessionUseCase
from shopgo.application.use_cases.refresh_session import RefreshSessionUseCase
from shopgo.application.use_cases.register_user import RegisterUserUseCase
from shopgo.domain.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidSessionError,
    MalformedCredentialError,
    SessionExpiredError,
)
from shopgo.shared.config import get_settings


router = APIRouter()

REFRESH_COOKIE_NAME = "refresh_token"
REFRESH_COOKIE_PATH = "/"


def _set_refresh_cookie(response: Response, refresh_credential: str, max_age_seconds: int) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_credential,
        httponly=True,
        samesite="strict",
        secure=get_settings().refresh_cookie_secure,
        max_age=max_age_seconds,
        path=REFRESH_COOKIE_PATH,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=REFRESH_COOKIE_NAME,
        path=REFRESH_COOKIE_PATH,
        httponly=True,
        samesite="strict",
        secure=get_settings().refresh_cookie_secure,
    )


def _cookie_max_age_seconds(refresh_expires_at: datetime) -> int:
    now = datetime.now(timezone.utc)
    return max(int((refresh_expires_at - now).total_seconds()), 0)


@router.post("/v1/auth/register", response_model=RegisterResponse, status_code=201)
def register_user(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(
            RegisterUserInput(
                email=req.email,
                password=req.password,
                display_name=req.display_name,
            )
        )
    except DuplicateIdentityError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return RegisterResponse(user=asdict(output.user))


@router.post("/v1/auth/login", response_model=AuthTokenResponse)
def login_local(
    req: LoginRequest,
    response: Response,
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(LoginLocalInput(email=req.email, password=req.password))
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    _set_refresh_cookie(
        response,
        output.refresh_credential,
        max_age_seconds=_cookie_max_age_seconds(output.refresh_expires_at),
    )
    return AuthTokenResponse(
        access_token=output.access_token,
        access_expires_at=output.access_expires_at,
        refresh_expires_at=output.refresh_expires_at,
        user=asdict(output.user),
    )


@router.post("/v1/auth/refresh", response_model=RefreshResponse)
def refresh_auth(
    refresh_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    if not refresh_cookie:
        raise HTTPException(status_code=401, detail="Missing refresh token cookie.")

    try:
        output = use_case.execute(RefreshSessionInput(refresh_credential=refresh_cookie))
    except (MalformedCredentialError, InvalidSessionError, SessionExpiredError) as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return RefreshResponse(
        access_token=output.access_token,
        access_expires_at=output.access_expires_at,
    )


@router.post("/v1/auth/logout", response_model=LogoutResponse)
def logout_auth(
    response: Response,
    refresh_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    if refresh_cookie:
        use_case.execute(LogoutInput(refresh_credential=refresh_cookie))
    _clear_refresh_cookie(response)
    return LogoutResponse(ok=True)
