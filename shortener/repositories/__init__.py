"""Repository layer for the URL shortener application.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from shortener.repositories.base import (
    BaseRepository,
    RepositoryError,
    DuplicateEntityError,
)
from shortener.repositories.url_repository import URLRepository
from shortener.repositories.user_repository import UserRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "DuplicateEntityError",

    # Concrete repositories
    "URLRepository",
    "UserRepository",
]
