"""User Repository for the URL shortener application.

Credential lookups used to authorize deletions.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from shortener.core.security import DUMMY_HASH, hash_password, verify_password
from shortener.models.user import Credential, CredentialCreate
from shortener.repositories.base import BaseRepository


class UserRepository(BaseRepository[Credential, CredentialCreate]):
    """Repository for Credential database operations."""

    unique_fields = ("username",)

    def __init__(self):
        super().__init__(Credential)

    async def find_credential(
        self,
        db: AsyncSession,
        username: str,
        password: str
    ) -> Optional[Credential]:
        """
        Find the credential matching a username and password.

        The password is checked against the stored bcrypt hash. An unknown
        username still performs one hash comparison. bcrypt runs in the
        threadpool, off the event loop.

        Args:
            db: Database session
            username: Login name, matched exactly
            password: Plaintext password to verify

        Returns:
            The Credential if both match, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        credential = await self.get_one_by(db, username=username)
        if credential is None:
            await run_in_threadpool(verify_password, password, DUMMY_HASH)
            return None
        if not await run_in_threadpool(verify_password, password, credential.password_hash):
            return None
        return credential

    async def create_user(self, db: AsyncSession, data: CredentialCreate) -> Credential:
        """
        Store a new credential, hashing its password.

        Raises:
            DuplicateEntityError: If the username is taken
            RepositoryError: On other database errors
        """
        password_hash = await run_in_threadpool(hash_password, data.password)
        return await self.create(db, {"username": data.username, "password_hash": password_hash})
