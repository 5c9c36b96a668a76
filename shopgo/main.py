from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.deps import get_purge_expired_sessions_use_case
from .api.routers import auth, me, orders, payments
from .domain.exceptions import StorageFailureError
from .infrastructure.db.engine import Base, get_engine
from .shared.config import Settings, get_settings
from .shared.logging import configure_logging


logger = logging.getLogger(__name__)


def _create_schema(settings: Settings) -> None:
    # Registers the tables on Base.metadata.
    from .infrastructure.db.models import accounts, cart, orders as order_models  # noqa: F401

    Base.metadata.create_all(get_engine(settings.postgres_dsn, settings.db_statement_timeout_ms))
    logger.info("startup: schema ensured")


def _run_session_sweep(stop: threading.Event, interval_seconds: float) -> None:
    while not stop.wait(interval_seconds):
        try:
            get_purge_expired_sessions_use_case().execute()
        except Exception:
            logger.exception("session_sweep: failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)

    if settings.db_auto_create and settings.postgres_dsn:
        _create_schema(settings)

    stop = threading.Event()
    sweeper = None
    if settings.session_sweep_interval_seconds > 0 and settings.postgres_dsn:
        sweeper = threading.Thread(
            target=_run_session_sweep,
            args=(stop, settings.session_sweep_interval_seconds),
            name="session-sweep",
            daemon=True,
        )
        sweeper.start()
    try:
        yield
    finally:
        stop.set()
        if sweeper is not None:
            sweeper.join(timeout=5)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="shopgo API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageFailureError)
    async def storage_failure_handler(request: Request, exc: StorageFailureError):
        logger.error("storage_failure: path=%s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(auth.router)
    app.include_router(me.router)
    app.include_router(payments.router)
    app.include_router(orders.router)
    return app


app = create_app()
