"""
FastAPI Application Entry Point

Integrates:
  - Kommo chat webhook (POST /chat/webhook)
  - Kommo OAuth callback page (GET /oauth/callback)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from agent.replies import ReplyClassifier
from config import Config, load_config
from transport.kommo.webhook import Dispatch, KommoWebhookHandler, create_router
from webhook.oauth import create_oauth_router

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    config: Optional[Config] = None,
    dispatch: Optional[Dispatch] = None,
    classifier: Optional[ReplyClassifier] = None,
) -> FastAPI:
    """
    Build the application around one immutable Config.

    Args:
        config: Process configuration (loaded from the environment if None)
        dispatch: Replacement for the Kommo sender (tests)
        classifier: Replacement reply rules
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("=" * 60)
        logger.info("Wamid Kommo bot starting up...")
        logger.info(f"Environment: {config.environment}")
        logger.info(f"Listening port: {config.port}")
        for warning in config.warnings():
            logger.warning(warning)
        logger.info("=" * 60)

        yield

        # Shutdown
        logger.info("Wamid Kommo bot shutting down...")

    app = FastAPI(
        title="Wamid Kommo Bot",
        description="Canned-reply assistant for the Kommo chat channel",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {type(e).__name__}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    handler = KommoWebhookHandler(config, classifier=classifier, dispatch=dispatch)
    app.state.config = config
    app.state.webhook_handler = handler

    # Include routers
    app.include_router(create_router(handler))
    app.include_router(create_oauth_router(config))

    @app.get("/health")
    async def health():
        """Liveness check."""
        return PlainTextResponse("ok")

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Wamid Kommo Bot",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "chat_webhook": "POST /chat/webhook",
                "oauth_callback": "GET /oauth/callback",
                "health": "GET /health",
            },
        }

    return app


settings = load_config()
configure_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
    )
