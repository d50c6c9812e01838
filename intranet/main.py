import threading
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intranet.auth import cleanup_expired_sessions
from intranet.config import Settings, get_settings
from intranet.database import build_engine, build_session_factory, init_db
from intranet.logger import logger, setup_logging
from intranet.pages import error_page
from intranet.routers import auth_router, intranet_router
from intranet.users import seed_users

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    engine = build_engine(settings.database_url, echo=settings.debug)
    session_factory = build_session_factory(engine)
    db_lock = threading.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.
        Stores are ready before the first request is accepted.
        """
        settings.check_secret()
        if settings.uses_default_secret:
            logger.warning("SESSION_SECRET_KEY not set, using the demo default. Set a strong value in production.")

        init_db(engine)
        with db_lock:
            db = session_factory()
            try:
                cleanup_expired_sessions(db)
                seed_users(db)
            finally:
                db.close()

        if not settings.is_production:
            logger.info("Running in development mode (cookie secure flag off). Set ENVIRONMENT=production behind HTTPS.")
        yield
        engine.dispose()

    app = FastAPI(
        title="Intranet RH",
        description="Session-authenticated intranet demo with a gated flag download",
        version="2.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.db_lock = db_lock

    @app.middleware("http")
    async def _security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def _request_logger(request: Request, call_next):
        t0 = time.perf_counter()
        response = await call_next(request)
        dt = (time.perf_counter() - t0) * 1000.0
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {dt:.1f} ms")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return HTMLResponse(
            error_page(exc.status_code, str(exc.detail)),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return HTMLResponse(
            error_page(status.HTTP_400_BAD_REQUEST, "Requête invalide"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
        return HTMLResponse(
            error_page(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erreur interne"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=SECURITY_HEADERS,
        )

    # Register routers
    app.include_router(auth_router.router)
    app.include_router(intranet_router.router)

    return app


app = create_app()
