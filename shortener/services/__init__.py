"""Service layer for the URL shortener application.

This package contains the business logic of the application: short code
allocation and the shorten, resolve and delete workflows.
"""

from shortener.services.codes import generate_short_code, resolve_unique_code
from shortener.services.shortener import ShortenedURLService, normalize_url

__all__ = [
    "ShortenedURLService",
    "generate_short_code",
    "normalize_url",
    "resolve_unique_code",
]
