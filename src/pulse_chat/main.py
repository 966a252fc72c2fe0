# src/pulse_chat/main.py
"""Main entry point for the Pulse Chat application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from pulse_chat.api.v1 import (
    auth_router,
    chats_router,
    messages_router,
    realtime_router,
    upload_router,
    users_router,
)
from pulse_chat.api.v1.errors import register_exception_handlers
from pulse_chat.core.logging import configure_logging
from pulse_chat.core.settings import settings
from pulse_chat.db.session import create_tables
from pulse_chat.services.messaging import add_message_listener, remove_message_listener
from pulse_chat.services.realtime import get_conversation_hub

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables and wire the realtime hub for the lifetime of the app."""
    create_tables()
    listener = get_conversation_hub().on_message_created
    if settings.realtime_enabled:
        add_message_listener(listener)
    logger.info("%s %s started", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        remove_message_listener(listener)


# Initialize FastAPI app
app = FastAPI(
    title="Pulse Chat API",
    description="Phone-verified one-to-one chat",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(chats_router, prefix="/api")
app.include_router(upload_router, prefix="/api")
if settings.realtime_enabled:
    app.include_router(realtime_router, prefix="/api")

# Locally stored uploads; unused when Cloudinary is configured
app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pulse_chat.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
