"""
FastAPI application bootstrap with: \n
- Lifespan-managed startup / shutdown logging \n
- Root logging configured from settings \n
- The intake router (which sets its own CORS headers on every response) \n

Environment contract (from `settings`): \n
- FRONTEND_URL: value of `Access-Control-Allow-Origin` (``*`` by default). \n
- LOG_LEVEL: root logging level. \n
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from legal_intake.api.fast_api import router
from legal_intake.database.config.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Nothing is preloaded: the database engine connects lazily and a chat
    model is built per request.
    """
    logger.info("Legal intake service starting (model=%s)", settings.OPEN_AI_MODEL)
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; chat requests will fail with 500")
    try:
        yield
    finally:
        logger.info("Legal intake service shutting down")


# Instantiate the FastAPI app with lifespan handler
app = FastAPI(lifespan=lifespan)
"""Instatiates a FastAPI application object with the startup/shutdown logging lifespan."""

# -----------------------
# API routes
# -----------------------
# CORS headers are set per route; preflights must reach the explicit OPTIONS routes.
app.include_router(router)
