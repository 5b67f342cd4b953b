"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortener.api.routes import health, redirect, shortener
from shortener.core.config import settings

# Create root router
api_router = APIRouter()

# Index, shorten and delete live at the root path
api_router.include_router(shortener.router)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Redirects go last so /{short_code} never shadows a fixed path
api_router.include_router(redirect.router)

__all__ = ["api_router"]
