"""URL shortening service for the URL shortener application.

This module contains the ShortenedURLService class which implements the
shorten, resolve and delete workflows on top of the mapping and credential
repositories.
"""

import logging
import random
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.config import settings
from shortener.db.session import db_transaction
from shortener.models.url import UrlMapping
from shortener.repositories.base import DuplicateEntityError, RepositoryError
from shortener.repositories.url_repository import URLRepository
from shortener.repositories.user_repository import UserRepository
from shortener.services.codes import resolve_unique_code
from shortener.services.exceptions import (
    AuthError,
    ShortCodeExhaustedError,
    StoreError,
    URLNotFoundError,
    URLValidationError,
)

logger = logging.getLogger(__name__)

REDIRECT_SCHEME = "https://"


def normalize_url(raw_url: str) -> str:
    """
    Strip one leading ``http://`` and then one leading ``https://``.

    Both prefixes are tried, always in this order, so
    ``"http://https://x"`` becomes ``"x"`` while ``"https://http://x"``
    becomes ``"http://x"``.
    """
    url = raw_url
    if url.startswith("http://"):
        url = url[len("http://"):]
    if url.startswith("https://"):
        url = url[len("https://"):]
    return url


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Holds no per-request state; the repositories are injected once and the
    database session is passed to every call.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        user_repository: UserRepository,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Mapping store
            user_repository: Credential store used to authorize deletions
            rng: Random source for code generation (SystemRandom when None)
        """
        self.url_repository = url_repository
        self.user_repository = user_repository
        self.rng = rng

    @db_transaction(db_param_name="db")
    async def shorten(self, db: AsyncSession, raw_url: str) -> str:
        """
        Return the short code for a URL, creating a mapping when needed.

        A URL that is already mapped gets its existing code back. When a
        concurrent writer inserts the same URL (or takes the drawn code)
        between our checks and our insert, the unique index rejects our row
        and the lookup is repeated.

        Args:
            db: Database session
            raw_url: URL as submitted, with or without scheme prefix

        Returns:
            str: The new or reused short code

        Raises:
            URLValidationError: If nothing is left after stripping the scheme
            StoreError: If the store fails
            ShortCodeExhaustedError: If no free code could be drawn
        """
        original_url = normalize_url(raw_url)
        if not original_url:
            raise URLValidationError("Please provide a URL.")

        attempts_left = settings.URL_CODE_MAX_ATTEMPTS
        while attempts_left > 0:
            short_code = await resolve_unique_code(
                db, self.url_repository, max_attempts=attempts_left, rng=self.rng
            )

            existing = await self._find_by_url(db, original_url)
            if existing is not None:
                # The freshly drawn code was never stored; dropping it is enough
                return existing.short_code

            try:
                mapping = await self.url_repository.insert(
                    db, {"short_code": short_code, "original_url": original_url}
                )
            except DuplicateEntityError as e:
                logger.warning(f"Insert conflict on {e.field_name}, looking the URL up again")
                attempts_left -= 1
                continue
            except RepositoryError as e:
                logger.error(f"Error creating URL mapping: {e}")
                raise StoreError("Database error.") from e

            logger.info(f"Created mapping {mapping.short_code}")
            return mapping.short_code

        raise ShortCodeExhaustedError(
            f"Failed to store a mapping after {settings.URL_CODE_MAX_ATTEMPTS} attempts"
        )

    async def resolve(self, db: AsyncSession, short_code: str) -> str:
        """
        Return the redirect target for a short code.

        The target always uses https, whatever scheme the URL was submitted
        with. Store failures are reported as not found so that internal
        errors never leak on this public path; they are logged first.

        Args:
            db: Database session
            short_code: Code to look up, used as-is

        Returns:
            str: ``https://`` followed by the stored URL

        Raises:
            URLNotFoundError: If no mapping exists or the lookup failed
        """
        try:
            mapping = await self.url_repository.find_by_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error resolving short code {short_code!r}: {e}")
            raise URLNotFoundError("No URL assigned to that shortcode.") from e

        if mapping is None:
            raise URLNotFoundError("No URL assigned to that shortcode.")

        return f"{REDIRECT_SCHEME}{mapping.original_url}"

    @db_transaction(db_param_name="db")
    async def delete(
        self,
        db: AsyncSession,
        short_code: str,
        username: str,
        password: str
    ) -> None:
        """
        Delete a mapping on behalf of an authenticated user.

        Args:
            db: Database session
            short_code: Code of the mapping to delete
            username: Login name
            password: Plaintext password

        Raises:
            AuthError: If the credentials do not match
            URLNotFoundError: If no mapping was deleted
            StoreError: If the credential lookup or the delete fails
        """
        try:
            credential = await self.user_repository.find_credential(db, username, password)
        except RepositoryError as e:
            logger.error(f"Error checking credentials: {e}")
            raise StoreError("Error while checking credentials.") from e

        if credential is None:
            logger.warning(f"Rejected delete of {short_code!r}: bad credentials for {username!r}")
            raise AuthError("Wrong username and, or password.")

        try:
            deleted = await self.url_repository.delete_by_code(db, short_code)
        except RepositoryError as e:
            logger.error(f"Error deleting short code {short_code!r}: {e}")
            raise StoreError("Unable to find or delete the shortcode.") from e

        if deleted == 0:
            raise URLNotFoundError("Unable to find or delete the shortcode.")

        logger.info(f"Deleted mapping {short_code} for user {credential.username}")

    async def _find_by_url(self, db: AsyncSession, original_url: str) -> Optional[UrlMapping]:
        try:
            return await self.url_repository.find_by_url(db, original_url)
        except RepositoryError as e:
            logger.error(f"Error looking up URL mapping: {e}")
            raise StoreError("Database error.") from e
