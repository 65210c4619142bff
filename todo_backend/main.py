"""FastAPI application for the todo backend."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import envelope
from .api.routes import router as todos_router
from .db import Database
from .errors import FatalStartupError
from .logging_utils import configure_logging, reset_request_id, set_request_id
from .settings import Settings, get_settings, load_database_url

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the connection pool before serving and close it on shutdown."""
    logger.info("Starting todo backend...")
    database: Optional[Database] = app.state.database
    if database is None:
        settings: Settings = app.state.settings
        database = Database(settings.database_url or load_database_url(), settings.pool)
        app.state.database = database

    if not database.is_connected:
        try:
            await database.connect()
        except FatalStartupError:
            logger.exception("Failed to initialize database connection")
            raise

    yield

    logger.info("Shutting down todo backend...")
    await database.close()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Todo API",
        description="Todo list management backed by PostgreSQL",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    envelope.install_exception_handlers(app)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(request_token)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        current: Optional[Database] = request.app.state.database
        return envelope.success("database", bool(current and current.is_connected))

    app.include_router(todos_router)
    return app


app = create_app()
