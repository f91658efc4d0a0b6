"""ecoquest FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecoquest.api import auth, badges, gods, health, learning, missions, proofs, rewards, users
from ecoquest.api import map as map_api
from ecoquest.core.config import settings
from ecoquest.core.errors import DomainError, UnauthenticatedError
from ecoquest.core.replay import require_fresh_request
from ecoquest.db.session import SessionLocal
from ecoquest.services.catalog_service import seed_catalog

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.seed_catalog:
        db = SessionLocal()
        try:
            seed_catalog(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
    dependencies=[Depends(require_fresh_request)],
)


def _envelope(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "request_rejected kind=%s status=%s path=%s message=%s",
        exc.kind,
        exc.status_code,
        request.url.path,
        exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return _envelope(exc.status_code, exc.message, headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, str(exc.detail), dict(exc.headers or {}))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Validation failed"
    return _envelope(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception path=%s method=%s", request.url.path, request.method)
    message = str(exc) if settings.debug else "Internal server error"
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(gods.router)
app.include_router(missions.router)
app.include_router(rewards.router)
app.include_router(badges.router)
app.include_router(learning.router)
app.include_router(map_api.router)
app.include_router(proofs.router)
