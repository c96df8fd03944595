"""WebVPN link service — FastAPI application.

Turns browser URLs into gateway addresses, verifies encoded paths and keeps
the preferred gateway origin.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from webvpn.auth import make_api_key_checker
from webvpn.config import WebvpnConfig, load_config
from webvpn.errors import (
    CodecError,
    EncodingError,
    InvalidInputError,
    MalformedPathError,
    PaddingError,
)
from webvpn.prefs import JsonFilePreferenceStore, PreferenceError, PreferenceStore
from webvpn.routes import convert, links, meta, prefs
from webvpn.schemes import get_codec

logger = logging.getLogger("webvpn")
audit_logger = logging.getLogger("webvpn.audit")

_STATUS_FOR_ERROR: list[tuple[type[Exception], int]] = [
    (InvalidInputError, 422),
    (MalformedPathError, 400),
    (PaddingError, 400),
    (EncodingError, 500),
    (PreferenceError, 500),
    (CodecError, 500),
]


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def install_error_handlers(app: FastAPI) -> None:
    """Map codec and preference errors onto HTTP responses."""
    for exc_type, status_code in _STATUS_FOR_ERROR:

        async def handler(request: Request, exc: Exception, status_code=status_code):
            if status_code >= 500:
                logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
            return _error_response(status_code, exc)

        app.add_exception_handler(exc_type, handler)


def include_routers(app: FastAPI, api_key: str = "") -> None:
    check_key = make_api_key_checker(api_key)
    app.include_router(meta.router, dependencies=[Depends(check_key)])
    app.include_router(convert.router, dependencies=[Depends(check_key)])
    app.include_router(links.router, dependencies=[Depends(check_key)])
    app.include_router(prefs.router, dependencies=[Depends(check_key)])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logging. Nothing to connect or close."""
    config: WebvpnConfig = app.state.config
    logger.info(
        "WebVPN link service ready (scheme: %s, default base: %s)",
        app.state.codec.name,
        config.base_url,
    )
    yield
    logger.info("WebVPN link service shut down")


def create_app(
    config: WebvpnConfig | None = None,
    store: PreferenceStore | None = None,
) -> FastAPI:
    """Application factory."""
    if config is None:
        config = load_config()

    app = FastAPI(
        title="WebVPN link",
        description="Rewrites URLs into WebVPN gateway paths",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    # Fail at startup on an unknown scheme, not on the first request.
    app.state.codec = get_codec(config.scheme)
    app.state.store = store if store is not None else JsonFilePreferenceStore(config.prefs_path)

    install_error_handlers(app)

    # ── Audit middleware ──────────────────────────────────────

    @app.middleware("http")
    async def audit_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        audit_logger.info(
            "%s %s %d %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    include_routers(app, config.api_key)

    return app
