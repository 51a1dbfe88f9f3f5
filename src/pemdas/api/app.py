"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pemdas.api.endpoints import create_evaluate_router
from pemdas.config import CalculatorConfig

logger = logging.getLogger(__name__)


def create_app(config: CalculatorConfig | None = None) -> FastAPI:
    """Build the application.

    Without an explicit config, settings are loaded from the environment
    on startup. The config is immutable; requests share nothing else.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.config = config or CalculatorConfig.load()
        logger.info(
            "Serving with domain=%s strict=%s",
            app.state.config.domain.value,
            app.state.config.strict,
        )
        yield

    app = FastAPI(title="pemdas", lifespan=lifespan)
    app.include_router(create_evaluate_router())
    return app


app = create_app()
