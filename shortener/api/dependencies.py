"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories and service instances.
"""

from fastapi import Depends

from shortener.core.config import settings
from shortener.repositories.url_repository import URLRepository
from shortener.repositories.user_repository import UserRepository
from shortener.services.shortener import ShortenedURLService


async def get_url_repository():
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_user_repository():
    """Get an instance of the user repository."""
    return UserRepository()


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo, user_repository=user_repo)


def get_base_url():
    """Get the base URL for shortened links."""
    return settings.BASE_URL.rstrip("/")
