# gateway/main.py
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from gateway.api.deps import append_set_cookies
from gateway.api.v1.protected import router as protected_router
from gateway.api.v1.public import router as public_router
from gateway.api.v1.verify import router as verify_router
from gateway.core.config import Settings, get_settings
from gateway.core.logging import setup_logging
from gateway.database import make_engine, make_sessionmaker
from gateway.schemas.sessions import ErrorOut
from gateway.services.repo.sessions_async import SessionStore, SqlSessionStore
from gateway.services.session.errors import GateDenied
from gateway.services.session.gate import AuthGate
from gateway.services.session.refresh import RefreshClient, make_http_client
from gateway.services.session.validator import RefreshAuthority, SessionValidator
from gateway.services.session.verifier import SessionVerifier

log = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    store: SessionStore | None = None,
    authority: RefreshAuthority | None = None,
) -> FastAPI:
    """
    Builds the API. `store` / `authority` are created in the lifespan from
    settings unless passed in (tests pass fakes).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        owned_client: RefreshClient | None = None

        # --- startup ---
        sess_store = store
        if sess_store is None:
            engine = make_engine(settings.async_database_url, settings.database_max_connections)
            sess_store = SqlSessionStore(make_sessionmaker(engine))

        refresh_authority = authority
        if refresh_authority is None:
            owned_client = RefreshClient(
                settings.next_refresh_url,
                make_http_client(settings.refresh_timeout_seconds),
                timeout_s=settings.refresh_timeout_seconds,
            )
            refresh_authority = owned_client

        validator = SessionValidator(
            sess_store,
            refresh_authority,
            refresh_window=timedelta(minutes=settings.refresh_window_minutes),
        )
        app.state.settings = settings
        app.state.gate = AuthGate(validator, settings.session_cookie_name)
        app.state.verifier = SessionVerifier(sess_store)
        log.info("gateway ready (cookie=%s, refresh=%s)", settings.session_cookie_name, settings.next_refresh_url)

        try:
            yield
        finally:
            # --- shutdown ---
            if owned_client is not None:
                await owned_client.aclose()
            if engine is not None:
                await engine.dispose()

    app = FastAPI(
        title="Session Gateway",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS: configured origins, otherwise reflect whatever Origin came in
    origins = settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=None if origins else ".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Cookie"],
    )

    @app.exception_handler(GateDenied)
    async def _gate_denied(request: Request, exc: GateDenied) -> JSONResponse:
        resp = JSONResponse(status_code=401, content=ErrorOut(error=exc.reason).model_dump())
        append_set_cookies(resp, exc.cookies)
        return resp

    # -------------------------------------------------------------------------
    # Routers
    app.include_router(public_router)
    app.include_router(protected_router, prefix="/api")
    app.include_router(verify_router, prefix="/api")

    return app


def build_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_style)
    return create_app(settings)
