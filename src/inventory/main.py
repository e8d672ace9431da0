"""
Application factory and server entry point.

    create_app(settings)   -> FastAPI app (tests pass their own engine)
    run()                  -> python -m inventory
"""
import asyncio
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from inventory.api.v1 import api_router
from inventory.api.v1.error_handlers import register_exception_handlers
from inventory.config.settings import Settings, get_settings
from inventory.core.logging import RequestIDMiddleware, setup_logging
from inventory.database.session import build_engine, build_session_factory, ping
from inventory.exceptions.classifier import ErrorClassifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ping(app.state.engine)
    logger.info("app.startup", extra={"env": app.state.settings.ENV})
    try:
        yield
    finally:
        await app.state.engine.dispose()
        logger.info("app.shutdown")


def create_app(settings: Settings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: defaults to get_settings()
        engine: defaults to an engine for settings.DATABASE_URL

    Raises:
        KnownFailure(STORAGE_UNAVAILABLE): no engine given and DATABASE_URL is not configured
    """
    settings = settings or get_settings()
    setup_logging(settings)

    engine = engine or build_engine(settings)

    app = FastAPI(title="Inventory API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.classifier = ErrorClassifier(expose_details=settings.expose_error_details)

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    return app


async def check_database(settings: Settings) -> None:
    engine = build_engine(settings)
    try:
        await ping(engine)
    finally:
        await engine.dispose()


def run() -> None:
    """Serve on HOST:PORT after confirming the store is reachable; exit 1 otherwise."""
    settings = get_settings()
    setup_logging(settings)

    try:
        asyncio.run(check_database(settings))
    except Exception:
        logger.exception("Failed to start server: database is unreachable or not configured")
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server is running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
