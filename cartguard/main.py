"""ASGI entry point (``cartguard.main:app``) for any ASGI server.

Routers are mounted explicitly. Evidence and catalogs arrive in request
bodies, so there is nothing to open or close besides logging.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cartguard import __version__
from cartguard.api.error_handlers import register_error_handlers
from cartguard.api.routes import content, evaluation, evidence, health
from cartguard.config import get_settings
from cartguard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    cfg = get_settings()
    setup_logging(cfg.log_level, cfg.log_format)
    logger.info("CartGuard API %s ready", __version__)
    yield
    logger.info("CartGuard API stopping")


def create_app() -> FastAPI:
    application = FastAPI(title="CartGuard API", version=__version__, lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    for module in (health, evaluation, content, evidence):
        application.include_router(module.router)
    register_error_handlers(application)
    return application


app = create_app()
