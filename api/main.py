"""
api/main.py -- FastAPI application entry point for the ranking service.

Forwards rank-change requests to the Roblox group API on behalf of callers
holding the shared API key.

Run with:      python main.py
               uvicorn asgi:app --reload

Lifespan handles startup (settings load, Roblox session login) and shutdown
(close the HTTP session). A failed or skipped login is logged, never fatal:
the server keeps listening and ranking calls fail at the upstream step.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse
from api.router import router as api_router
from core.config import get_settings
from core.errors import UNKNOWN_ERROR_MESSAGE, RankingAPIError, RobloxAPIError
from core.roblox import RobloxClient

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("rankbridge.api")

VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def _login(client: RobloxClient, cookie: str) -> None:
    """Authenticate the Roblox session. Logs the outcome; never raises."""
    logger.info("Logging in to Roblox...")
    try:
        user = client.login(cookie)
        logger.info("Logged in successfully! (%s, ID: %s)", user.get("name"), user.get("id"))
    except RobloxAPIError as e:
        logger.error("Failed to log in: %s", e.message)
    except Exception as e:
        logger.exception("Failed to log in: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load credentials once, build the Roblox client, and log in if possible.

    Settings live on app.state for the process lifetime and are passed to the
    auth gate and ranking handler from there. Missing credentials skip the
    login but do not stop the server from starting.
    """
    settings = get_settings()
    app.state.settings = settings
    app.state.roblox = RobloxClient()

    missing = settings.missing()
    if missing:
        logger.error(
            "Missing required environment variables. Check ROBLOX_COOKIE, GROUP_ID, and API_KEY. (missing: %s)",
            ", ".join(missing),
        )
    else:
        _login(app.state.roblox, settings.roblox_cookie)

    yield

    app.state.roblox.close()
    logger.info("Ranking API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Group Ranking API",
    description="Set Roblox group ranks by username, authenticated with a shared API key.",
    version=VERSION,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time is captured around call_next for the latency field.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(api_router)
# The plain-text banner router is mounted by asgi.py, not here.


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {"success": false, "error": "..."} envelope so
# API clients can parse errors uniformly.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(RankingAPIError)
async def ranking_error_handler(request: Request, exc: RankingAPIError) -> JSONResponse:
    """Map the core error taxonomy onto its status code and message."""
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 when query params fail validation."""
    return _error(422, f"Request validation failed: {exc.errors()}")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap routing errors (404, 405) and any HTTPException in the error envelope."""
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the server log only; the client receives the
    generic unknown-error message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, UNKNOWN_ERROR_MESSAGE)
