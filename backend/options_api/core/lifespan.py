"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine
from shared.config.settings import settings
from shared.config.logging import setup_logging, options_api_logger as logger
from options_api.models import Base
from options_api.registry import OPTION_ENTITIES
from options_api.services.events import start_export_processor, stop_export_processor


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with this configuration."
            )
        logger.warning("Running with development defaults")

    logger.info(
        "Starting options API",
        port=settings.api_port,
        env=settings.environment,
        kinds=len(OPTION_ENTITIES),
    )

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    # Inline exports make the background processor unnecessary
    run_processor = settings.export_processor_enabled and not settings.export_sync
    if run_processor:
        await start_export_processor()

    yield

    logger.info("Shutting down options API")
    if run_processor:
        await stop_export_processor()
