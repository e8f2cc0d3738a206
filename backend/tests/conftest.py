"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from datetime import UTC, datetime, timedelta
from typing import AsyncGenerator
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from infrastructure.database.models import (
    Base,
    ContentPost,
    NewsletterSubscriber,
    Subscriber,
    UserRoleAssignment,
)
from infrastructure.database.connection import get_db
from api.dependencies import token_service


# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here to avoid circular imports
    from main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # Reset rate limiter state between tests to prevent cross-test 429s
    app.state.limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def make_auth_headers(user_id: str, email: str | None = None) -> dict:
    """Authorization header carrying a token for the given user."""
    access_token = token_service.create_access_token(user_id=user_id, email=email)
    return {"Authorization": f"Bearer {access_token}"}


# ============================================================================
# User Fixtures
# ============================================================================


async def _create_user(db_session: AsyncSession, *roles: str) -> str:
    user_id = str(uuid4())
    for role in roles:
        db_session.add(UserRoleAssignment(user_id=user_id, role=role))
    await db_session.commit()
    return user_id


@pytest.fixture
async def author_id(db_session: AsyncSession) -> str:
    """User holding the author role."""
    return await _create_user(db_session, "author")


@pytest.fixture
async def admin_id(db_session: AsyncSession) -> str:
    """User holding the admin role."""
    return await _create_user(db_session, "admin")


@pytest.fixture
def author_headers(author_id: str) -> dict:
    return make_auth_headers(author_id, "author@example.com")


@pytest.fixture
def admin_headers(admin_id: str) -> dict:
    return make_auth_headers(admin_id, "admin@example.com")


# ============================================================================
# Subscriber Fixtures
# ============================================================================


async def create_subscriber(
    db_session: AsyncSession,
    email: str,
    subscribed: bool = True,
    tier: str | None = None,
    subscription_end: datetime | None = None,
    user_id: str | None = None,
) -> Subscriber:
    """Insert a paid subscriber row."""
    subscriber = Subscriber(
        id=str(uuid4()),
        user_id=user_id,
        email=email,
        subscribed=subscribed,
        subscription_tier=tier,
        subscription_end=subscription_end,
    )
    db_session.add(subscriber)
    await db_session.commit()
    await db_session.refresh(subscriber)
    return subscriber


async def create_newsletter_reader(
    db_session: AsyncSession,
    email: str,
    subscribed: bool = True,
    first_name: str | None = None,
) -> NewsletterSubscriber:
    """Insert a newsletter sign-up row."""
    reader = NewsletterSubscriber(
        id=str(uuid4()),
        email=email,
        first_name=first_name,
        subscribed=subscribed,
    )
    db_session.add(reader)
    await db_session.commit()
    await db_session.refresh(reader)
    return reader


@pytest.fixture
async def premium_viewer(db_session: AsyncSession) -> dict:
    """Auth headers for a user with an active premium subscription."""
    user_id = await _create_user(db_session)
    await create_subscriber(
        db_session,
        email="premium@example.com",
        tier="premium",
        subscription_end=datetime.now(UTC) + timedelta(days=30),
        user_id=user_id,
    )
    return make_auth_headers(user_id, "premium@example.com")


@pytest.fixture
async def core_viewer(db_session: AsyncSession) -> dict:
    """Auth headers for a user with an active core subscription."""
    user_id = await _create_user(db_session)
    await create_subscriber(db_session, email="core@example.com", tier="core", user_id=user_id)
    return make_auth_headers(user_id, "core@example.com")


@pytest.fixture
async def lapsed_viewer(db_session: AsyncSession) -> dict:
    """Auth headers for a user whose business subscription was cancelled."""
    user_id = await _create_user(db_session)
    await create_subscriber(
        db_session,
        email="lapsed@example.com",
        subscribed=False,
        tier="business",
        user_id=user_id,
    )
    return make_auth_headers(user_id, "lapsed@example.com")


# ============================================================================
# Content Fixtures
# ============================================================================


async def create_post(
    db_session: AsyncSession,
    author_id: str,
    slug: str,
    visibility: str = "public",
    required_min_tier: str | None = None,
    status: str = "published",
    content_type: str = "blog",
    delivery_method: str = "dashboard",
    published_at: datetime | None = None,
    scheduled_for: datetime | None = None,
) -> ContentPost:
    """Insert a post directly, bypassing the author workflow."""
    if status == "published" and published_at is None:
        published_at = datetime.now(UTC)
    post = ContentPost(
        id=str(uuid4()),
        author_id=author_id,
        title=slug.replace("-", " ").title(),
        slug=slug,
        content=f"Body of {slug}",
        excerpt=f"Excerpt of {slug}",
        content_type=content_type,
        visibility=visibility,
        required_min_tier=required_min_tier,
        status=status,
        delivery_method=delivery_method,
        published_at=published_at,
        scheduled_for=scheduled_for,
    )
    db_session.add(post)
    await db_session.commit()
    await db_session.refresh(post)
    return post


@pytest.fixture
async def catalog(db_session: AsyncSession, author_id: str) -> dict[str, ContentPost]:
    """
    One published post per visibility level, plus a draft.

    Publication times increase in declaration order so the feed lists them
    newest first.
    """
    base = datetime.now(UTC) - timedelta(hours=1)
    specs = [
        ("public-post", "public", None),
        ("subscribers-post", "subscribers", None),
        ("core-post", "tiered", "core"),
        ("premium-post", "tiered", "premium"),
        ("business-post", "tiered", "business"),
    ]
    posts = {}
    for offset, (slug, visibility, tier) in enumerate(specs):
        posts[slug] = await create_post(
            db_session,
            author_id,
            slug,
            visibility=visibility,
            required_min_tier=tier,
            published_at=base + timedelta(minutes=offset),
        )
    posts["draft-post"] = await create_post(db_session, author_id, "draft-post", status="draft")
    return posts


@pytest.fixture
def make_post(db_session: AsyncSession, author_id: str):
    """Factory inserting posts owned by the author fixture."""

    async def _make(slug: str, **kwargs) -> ContentPost:
        return await create_post(db_session, kwargs.pop("author_id", author_id), slug, **kwargs)

    return _make


@pytest.fixture
def make_subscriber(db_session: AsyncSession):
    """Factory inserting paid subscriber rows."""

    async def _make(email: str, **kwargs) -> Subscriber:
        return await create_subscriber(db_session, email, **kwargs)

    return _make


@pytest.fixture
def make_reader(db_session: AsyncSession):
    """Factory inserting newsletter sign-ups."""

    async def _make(email: str, **kwargs) -> NewsletterSubscriber:
        return await create_newsletter_reader(db_session, email, **kwargs)

    return _make
