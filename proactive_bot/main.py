"""
Teams Proactive Bot service - FastAPI application.

Handles Microsoft Teams Bot Framework webhooks and provides a REST API
for proactive messaging.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proactive_bot import __version__
from proactive_bot.api.messages import router as messages_router
from proactive_bot.api.notify import router as notify_router
from proactive_bot.config import BotSettings
from proactive_bot.error_handlers import register_error_handlers
from proactive_bot.services import BotServices

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown."""
    logger.info("Teams proactive bot starting up...")

    # State and conversation references are in-memory only
    yield

    logger.info(
        f"Teams proactive bot shutting down, discarding "
        f"{len(app.state.services.registry)} conversation references"
    )


def create_app(
    settings: Optional[BotSettings] = None,
    services: Optional[BotServices] = None
) -> FastAPI:
    """Create the FastAPI app with its bot services attached."""
    settings = settings or (services.settings if services else BotSettings.from_env())
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Teams Proactive Bot",
        description="Microsoft Teams bot with proactive messaging API",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = services or BotServices(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(messages_router)
    app.include_router(notify_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {
            "status": "healthy",
            "service": "teams-proactive-bot",
            "version": __version__,
            "conversations": len(app.state.services.registry)
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "teams-proactive-bot",
            "status": "running",
            "endpoints": {
                "health": "/health",
                "bot_webhook": "/api/messages",
                "notify": "/api/notify",
                "conversations": "/api/conversations"
            }
        }

    return app


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = BotSettings.from_env()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
