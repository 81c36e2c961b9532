"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_PATH"] = tempfile.mkdtemp(prefix="greenlife-uploads-")
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["EMAIL_BACKEND"] = "console"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from greenlife.config import settings
from greenlife.database import get_session
from greenlife.main import app
from greenlife.models import Post, PostCategory, PostStatus, Role, User
from greenlife.services.auth import create_token
from greenlife.services.email import email_service
from greenlife.services.passwords import hash_password
from greenlife.services.rate_limit import InMemoryRateLimiter, set_rate_limiter

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def rate_limiter():
    """Give every test a fresh in-memory limiter."""
    limiter = InMemoryRateLimiter()
    set_rate_limiter(limiter)
    yield limiter
    set_rate_limiter(None)


@pytest.fixture(autouse=True)
def mock_email_backend():
    """Capture outgoing email instead of logging it."""
    backend = MagicMock()
    backend.send = AsyncMock(return_value=True)
    with patch.object(email_service, "_backend", backend):
        yield backend


@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        settings.database_url_test,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with factory() as session:
        yield session


@pytest.fixture
async def client(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def user(session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        username="Test User",
        email="test@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        role=Role.USER,
    )
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def admin_user(session: AsyncSession) -> User:
    """Create a test admin user."""
    user = User(
        username="Admin User",
        email="admin@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        role=Role.ADMIN,
    )
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
def user_token(user: User) -> str:
    """Create a JWT token for the test user."""
    return create_token(user)


@pytest.fixture
def admin_token(admin_user: User) -> str:
    """Create a JWT token for the admin user."""
    return create_token(admin_user)


@pytest.fixture
def auth_headers(user_token: str) -> dict[str, str]:
    """Create authorization headers for the test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    """Create authorization headers for the admin user."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
async def draft_post(session: AsyncSession, admin_user: User) -> Post:
    """Create an unpublished post."""
    post = Post(
        title="Draft Story",
        content="<p>Work in progress</p>",
        category=PostCategory.IMPACT_STORY,
        status=PostStatus.DRAFT,
        author_id=admin_user.id,
    )
    session.add(post)
    await session.commit()
    return post


@pytest.fixture
async def published_post(session: AsyncSession, admin_user: User) -> Post:
    """Create a published post."""
    post = Post(
        title="Tree Planting Day",
        content="<p>We planted 500 trees.</p>",
        category=PostCategory.BLOG,
        status=PostStatus.PUBLISHED,
        published_at=datetime(2026, 3, 1, 9, 0, tzinfo=UTC),
        author_id=admin_user.id,
    )
    session.add(post)
    await session.commit()
    return post


# Helper to make authenticated requests
class AuthenticatedClient:
    """Wrapper for AsyncClient with authentication."""

    def __init__(self, client: AsyncClient, headers: dict[str, str]):
        self.client = client
        self.headers = headers

    async def get(self, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.get(url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.post(url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.put(url, **kwargs)


@pytest.fixture
def authenticated_client(client: AsyncClient, auth_headers: dict[str, str]) -> AuthenticatedClient:
    """Create an authenticated test client."""
    return AuthenticatedClient(client, auth_headers)


@pytest.fixture
def admin_client(client: AsyncClient, admin_headers: dict[str, str]) -> AuthenticatedClient:
    """Create an authenticated admin test client."""
    return AuthenticatedClient(client, admin_headers)
