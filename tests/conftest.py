"""Test fixtures for the URL shortener application."""

import os

# Settings are read once at import time, so the test environment must be in
# place before anything from the shortener package is imported.
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_FILE"] = "false"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["BASE_URL"] = "http://testserver"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shortener.db.base import init_models
from shortener.db.session import get_db
from shortener.main import app as main_app
from shortener.repositories.url_repository import URLRepository
from shortener.repositories.user_repository import UserRepository
from shortener.services.shortener import ShortenedURLService

# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for every test.

    Services commit their own transactions, so isolation comes from
    throwing the whole database away rather than rolling back.
    """
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    await init_models(bind=engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session bound to the per-test engine."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def url_repository() -> URLRepository:
    return URLRepository()


@pytest.fixture
def user_repository() -> UserRepository:
    return UserRepository()


@pytest.fixture
def shortener_service(url_repository, user_repository) -> ShortenedURLService:
    return ShortenedURLService(url_repository=url_repository, user_repository=user_repository)


@pytest.fixture
def override_get_db(test_db):
    """Override the get_db dependency for testing."""
    async def _override_get_db():
        yield test_db

    return _override_get_db


@pytest.fixture
def test_app(override_get_db):
    """FastAPI app with the test session injected."""
    main_app.dependency_overrides[get_db] = override_get_db
    yield main_app
    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
