"""Tests for the credential repository."""

import asyncio
import time
from datetime import timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shortener.core.security import verify_password
from shortener.models.user import Credential, CredentialCreate
from shortener.repositories.base import DuplicateEntityError
from tests.utils import create_test_user


@pytest.mark.repository
class TestUserRepository:

    @pytest.mark.asyncio
    async def test_create_user_hashes_password(self, test_db, user_repository):
        credential = await user_repository.create_user(
            test_db, CredentialCreate(username="alice", password="hunter2")
        )

        assert credential.id is not None
        assert credential.password_hash != "hunter2"
        assert credential.password_hash.startswith("$2")
        assert verify_password("hunter2", credential.password_hash)

    @pytest.mark.asyncio
    async def test_create_duplicate_user(self, test_db, user_repository):
        await create_test_user(test_db, username="alice")

        with pytest.raises(DuplicateEntityError) as excinfo:
            await user_repository.create_user(
                test_db, CredentialCreate(username="alice", password="other")
            )

        assert excinfo.value.field_name == "username"

    @pytest.mark.asyncio
    async def test_find_credential(self, test_db, user_repository):
        created = await create_test_user(test_db, username="admin", password="secret")

        credential = await user_repository.find_credential(test_db, "admin", "secret")

        assert credential is not None
        assert credential.id == created.id

    @pytest.mark.asyncio
    async def test_find_credential_wrong_password(self, test_db, user_repository):
        await create_test_user(test_db, username="admin", password="secret")

        assert await user_repository.find_credential(test_db, "admin", "Secret") is None

    @pytest.mark.asyncio
    async def test_find_credential_unknown_user(self, test_db, user_repository):
        await create_test_user(test_db, username="admin", password="secret")

        assert await user_repository.find_credential(test_db, "root", "secret") is None

    @pytest.mark.asyncio
    async def test_find_credential_username_is_exact(self, test_db, user_repository):
        await create_test_user(test_db, username="admin", password="secret")

        assert await user_repository.find_credential(test_db, "Admin", "secret") is None

    @pytest.mark.asyncio
    async def test_created_at_is_timezone_aware(self, test_db):
        credential = await create_test_user(test_db, username="admin")

        assert Credential.__table__.c.created_at.type.timezone is True
        assert Credential(username="x", password_hash="y").created_at.tzinfo is timezone.utc
        assert credential.created_at is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["admin", "nobody"])
    async def test_password_check_does_not_block_event_loop(self, test_db, user_repository, username):
        """Other coroutines keep running while a password is being checked."""
        await create_test_user(test_db, username="admin", password="secret")

        def slow_verify(password, password_hash):
            time.sleep(0.3)
            return True

        ticks = 0
        checking = True

        async def ticker():
            nonlocal ticks
            while checking:
                ticks += 1
                await asyncio.sleep(0.01)

        ticker_task = asyncio.create_task(ticker())
        with patch("shortener.repositories.user_repository.verify_password", side_effect=slow_verify):
            await user_repository.find_credential(test_db, username, "secret")
        checking = False
        await ticker_task

        assert ticks >= 5


class TestCredentialCreate:

    def test_password_up_to_72_bytes(self):
        assert CredentialCreate(username="alice", password="a" * 72).password == "a" * 72

    def test_password_over_72_bytes_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            CredentialCreate(username="alice", password="a" * 73)

        assert "72 bytes" in str(excinfo.value)

    def test_password_size_counts_bytes(self):
        # 37 two-byte characters are 74 bytes
        with pytest.raises(ValidationError):
            CredentialCreate(username="alice", password="é" * 37)

    def test_empty_password_rejected(self):
        with pytest.raises(ValidationError):
            CredentialCreate(username="alice", password="")
