from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidtube.api.container import AppContainer, build_container
from vidtube.api.responses import register_exception_handlers
from vidtube.api.routers import healthcheck, users
from vidtube.shared.config import get_settings
from vidtube.shared.logging_config import configure_logging


logger = logging.getLogger(__name__)


def create_app(container: AppContainer | None = None) -> FastAPI:
    """Build the API. Without ``container`` one is built from settings at startup."""
    settings = container.settings if container is not None else get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            app.state.container = build_container(settings)
            logger.info("main: container_ready strict_refresh_rotation=%s", settings.strict_refresh_rotation)
        yield
        app.state.container.close()
        logger.info("main: container_closed")

    app = FastAPI(title="VidTube API", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(healthcheck.router)
    app.include_router(users.router)
    return app


app = create_app()
