"""URL Repository for the URL shortener application.

This module provides the URLRepository class, the mapping store behind the
shorten, resolve and delete workflows. It exposes exact-match lookups by code
and by normalized URL, insertion and deletion by code.
"""

from typing import Any, Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.models.url import UrlMapping, UrlMappingCreate, url_digest
from shortener.repositories.base import BaseRepository


class URLRepository(BaseRepository[UrlMapping, UrlMappingCreate]):
    """
    Repository for UrlMapping database operations.

    Uniqueness of ``short_code`` and of the URL digest (``url_hash``) is
    enforced by the table's unique indexes; a rejected insert surfaces as
    DuplicateEntityError naming the conflicting column.
    """

    unique_fields = ("url_hash", "short_code")

    def __init__(self):
        """Initialize the repository with the UrlMapping model type."""
        super().__init__(UrlMapping)

    async def find_by_code(self, db: AsyncSession, short_code: str) -> Optional[UrlMapping]:
        """
        Find a mapping by its short code.

        Args:
            db: Database session
            short_code: The code to look up, used as-is

        Returns:
            The UrlMapping if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_one_by(db, short_code=short_code)

    async def find_by_url(self, db: AsyncSession, original_url: str) -> Optional[UrlMapping]:
        """
        Find a mapping by its normalized URL.

        The lookup goes through the digest index; the URL itself is compared
        as well, so the match stays exact.

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_one_by(
            db, url_hash=url_digest(original_url), original_url=original_url
        )

    async def check_short_code_exists(self, db: AsyncSession, short_code: str) -> bool:
        """Check if a short code is already taken."""
        return await self.exists(db, short_code=short_code)

    async def insert(
        self,
        db: AsyncSession,
        data: Union[UrlMappingCreate, Dict[str, Any]]
    ) -> UrlMapping:
        """
        Insert a new mapping, deriving ``url_hash`` from the URL.

        Args:
            db: Database session
            data: Mapping data (either as a UrlMappingCreate model or dictionary)

        Returns:
            The created UrlMapping entity

        Raises:
            DuplicateEntityError: If the code or the URL is already mapped
            RepositoryError: On other database errors
        """
        if isinstance(data, UrlMappingCreate):
            data = data.model_dump(exclude_unset=True)
        row = {**data, "url_hash": url_digest(data["original_url"])}
        return await self.create(db, row)

    async def delete_by_code(self, db: AsyncSession, short_code: str) -> int:
        """
        Delete the mapping with the given short code.

        Args:
            db: Database session
            short_code: The code of the mapping to remove

        Returns:
            Number of mappings removed, 0 or 1

        Raises:
            RepositoryError: On database errors
        """
        return await self.bulk_delete(db, short_code=short_code)
