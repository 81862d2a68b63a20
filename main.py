"""
User Connection Service: FastAPI application entry point.

Run with:
    uvicorn main:app
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command as alembic_command
from alembic.config import Config as AlembicConfig
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import ConnectionServiceError
from app.models.database import engine
from app.routers import connections

logger = logging.getLogger("uvicorn.error")

BASE_DIR = Path(__file__).parent


def ensure_data_dir() -> None:
    if settings.DB_CONNECTION.startswith("sqlite"):
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)


def run_migrations() -> None:
    cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    cfg.attributes["configure_logger"] = False
    cfg.set_main_option("script_location", str(BASE_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", settings.DB_CONNECTION.replace("%", "%%"))
    alembic_command.upgrade(cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()

    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Applying database migrations...")
        await asyncio.to_thread(run_migrations)
        logger.info("Database migrations applied")

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    docs_url=settings.DOCS_URL if settings.ENABLE_SWAGGER else None,
    redoc_url=settings.REDOC_URL if settings.ENABLE_SWAGGER else None,
    lifespan=lifespan,
)

if settings.FORCE_HTTPS:
    app.add_middleware(HTTPSRedirectMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    if not settings.API_REQUEST_LOGGING_ENABLED:
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


@app.exception_handler(ConnectionServiceError)
async def connection_service_error_handler(request: Request, exc: ConnectionServiceError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


app.include_router(connections.router)
