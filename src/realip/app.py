"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from realip import __version__
from realip.api.routes import router
from realip.configs.config import AppConfig, get_app_config
from realip.core import RealIP, RealIPMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting realip application...")
    yield
    logger.info("Shutting down realip application...")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises:
        InvalidNetwork: if ``real_ip.trusted_networks`` holds a bad CIDR.
    """
    if config is None:
        config = get_app_config()

    app = FastAPI(
        title="realip",
        description="Echo service behind trusted reverse proxies",
        version=__version__,
        lifespan=lifespan,
    )

    if config.real_ip.enabled:
        app.add_middleware(
            RealIPMiddleware, real_ip=RealIP.from_config(config.real_ip)
        )
    else:
        logger.info("RealIP middleware disabled")

    app.include_router(router)

    return app
