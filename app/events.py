import logging

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def register_event_handlers(app: FastAPI) -> None:
    @app.on_event("startup")
    async def on_startup() -> None:
        config = app.state.settings
        logger.info(
            "Application startup name=%s version=%s environment=%s prefix=%s",
            config.app_name,
            config.app_version,
            config.environment,
            config.api_prefix,
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Application shutdown")
