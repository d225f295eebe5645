"""FastAPI application entrypoint with Lambda handler."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from mangum import Mangum

from .config import Settings, settings
from .models.policy import PathPolicy
from .routes import extension, health
from .services.demo_handler import DemoRequestHandler
from .services.dispatcher import ExtensionRequestHandler
from .services.pipeline import ExtensionPipeline
from .services.signature import SignatureVerifier, get_default_verifier

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info(f"Starting {settings.service_name} in {settings.environment} mode")
    if not app.state.pipeline.policy.entries:
        logger.warning("No extension paths registered. Set CEK_APPLICATION_ID or CEK_DEBUG_PATH.")
    yield
    logger.info(f"Shutting down {settings.service_name}")


def create_app(
    config: Settings | None = None,
    request_handler: ExtensionRequestHandler | None = None,
    verifier: SignatureVerifier | None = None,
) -> FastAPI:
    """
    Build the webhook application.

    The public key is loaded here, before any request is served, so a
    malformed key fails startup instead of a request.
    """
    config = config or settings

    pipeline = ExtensionPipeline(
        policy=PathPolicy.from_settings(config),
        handler=request_handler or DemoRequestHandler(),
        verifier=verifier or get_default_verifier(),
    )

    app = FastAPI(
        title="Clova CEK Service",
        description="Signed webhook endpoint for Clova Extension Kit requests",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )
    app.state.pipeline = pipeline

    # Include routers
    app.include_router(health.router)
    app.include_router(extension.create_router(pipeline, timeout=config.response_timeout))

    return app


app = create_app()

# Lambda handler via Mangum
handler = Mangum(app, lifespan="off")


def run() -> None:
    """Serve the application on the configured host and port."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
