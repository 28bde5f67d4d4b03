"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from rolegate.core.config import get_settings
from rolegate.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging. Shutdown: SQL engine dispose (only if it was created).
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    logger.info(
        "Starting %s %s (environment=%s)",
        settings.app_name,
        settings.app_version,
        settings.environment,
    )
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; persistence endpoints will return 503")

    yield

    # ---- Shutdown ----
    from rolegate.infrastructure.persistence import database

    if database.engine is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
