"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from greenlife import __version__
from greenlife.api.middleware import AccessGuardMiddleware, RequestIDMiddleware
from greenlife.api.router import api_router
from greenlife.config import settings
from greenlife.database import close_db
from greenlife.logging import setup_logging
from greenlife.schemas import FieldError, ValidationErrorResponse
from greenlife.services.auth import ConfigurationError
from greenlife.services.rate_limit import close_rate_limiter

setup_logging()

logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.sentry_dsn:
    import sentry_sdk

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Refuse to start rather than fail on the first login
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET must be set")
    yield
    await close_rate_limiter()
    await close_db()


app = FastAPI(
    title="GreenLife API",
    description="Content and outreach backend for the GreenLife website",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug_enabled else None,
    redoc_url="/api/redoc" if settings.debug_enabled else None,
    openapi_url="/api/openapi.json" if settings.debug_enabled else None,
)

# Starlette runs the last added middleware first: request ID, then CORS, then the guard
app.add_middleware(AccessGuardMiddleware)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(RequestIDMiddleware)  # type: ignore[arg-type]


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError):
    """Report every invalid field at once as 422."""
    body = ValidationErrorResponse(
        errors=[
            FieldError(field=_field_name(tuple(error.get("loc", ()))), message=error["msg"])
            for error in exc.errors()
        ]
    )
    return JSONResponse(body.model_dump(), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


app.include_router(api_router, prefix="/api")

# Serve uploaded media
uploads_dir = Path(settings.storage_path)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")


if __name__ == "__main__":
    import uvicorn

    from greenlife.logging import get_uvicorn_log_config

    uvicorn.run(
        "greenlife.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=get_uvicorn_log_config(),
    )
