# gymo/app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from gymo.app.api.v1.router import api_router
from gymo.app.core.config import Settings, TokenConfig, get_settings
from gymo.app.core.exceptions import setup_exception_handlers
from gymo.app.core.logging_config import setup_logging
from gymo.app.db import init_models
from gymo.app.db.session import create_engine_from_settings, create_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Configuration is read exactly once here; the token parameters and the
    session factory hang off app.state for the dependencies to pick up.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    token_config = TokenConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine_from_settings(settings)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        await init_models(engine)
        logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
        yield
        await engine.dispose()
        logger.info(f"{settings.PROJECT_NAME} stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_config = token_config

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
