"""FastAPI application entry point for the reasoning engine."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from reasoning_engine import __version__
from reasoning_engine.api.routes import router
from reasoning_engine.config import get_settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting Reasoning Engine v{__version__}")
    logger.info(f"Step generator: {settings.step_generator}, debug: {settings.debug}")

    yield

    logger.info("Shutting down Reasoning Engine")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Reasoning Engine",
        description="Sequential, planning and hybrid reasoning sessions",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "reasoning_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
