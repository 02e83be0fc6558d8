"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests.

Tests run against an in-memory SQLite database (aiosqlite) whose schema is
built from SQLModel.metadata, so no database server is needed.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator

# Settings are read at import time, so the environment must be in place
# before anything from threadline is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.dialects import mysql  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import threadline.models  # noqa: E402, F401  (registers tables on the metadata)
from threadline.core.database import get_db  # noqa: E402
from threadline.core.security import Identity, create_access_token  # noqa: E402
from threadline.main import app as main_app  # noqa: E402
from threadline.models import Comments, Posts, Subreddits  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="function")
async def engine():
    """
    Create a fresh in-memory database for each test function.

    StaticPool keeps a single connection so every session sees the same
    in-memory database. Tables are created from the SQLModel metadata.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(test_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    Configured like the application's session factory (no expiry on commit,
    no autoflush) so services behave the same as in production.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session

        # Cleanup - rollback any changes left uncommitted by the test
        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/v1/posts/")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        follow_redirects=True,
    ) as ac:
        yield ac


@pytest.fixture(scope="function")
def mysql_statements(db_session: AsyncSession) -> Generator[list[str], None, None]:
    """
    Record every statement the session executes, compiled for MySQL.

    SQLite drops row-locking clauses such as FOR UPDATE, so tests that check
    locking inspect the MySQL rendering instead. Statements emitted by flush
    are not recorded.
    """
    statements: list[str] = []

    def record(orm_execute_state) -> None:  # type: ignore[no-untyped-def]
        statements.append(str(orm_execute_state.statement.compile(dialect=mysql.dialect())))

    event.listen(db_session.sync_session, "do_orm_execute", record)
    yield statements
    event.remove(db_session.sync_session, "do_orm_execute", record)


# =============================================================================
# Identity Fixtures
# =============================================================================
# Tokens are signed with the test SECRET_KEY, exactly as the identity
# provider would sign them.


@pytest.fixture
def alice() -> Identity:
    """Identity with both first name and email."""
    return Identity(user_id="user-alice", email="alice@example.com", first_name="Alice")


@pytest.fixture
def bob() -> Identity:
    """Identity with email only; display name falls back to the email."""
    return Identity(user_id="user-bob", email="bob@example.com")


@pytest.fixture
def auth_headers() -> Callable[[Identity], dict[str, str]]:
    """
    Build Authorization headers for an identity.

    Usage:
        async def test_create(client, alice, auth_headers):
            await client.post("/api/v1/posts/", json=..., headers=auth_headers(alice))
    """

    def _make(identity: Identity) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(identity)}"}

    return _make


@pytest.fixture
def alice_headers(alice: Identity, auth_headers) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture
def bob_headers(bob: Identity, auth_headers) -> dict[str, str]:
    return auth_headers(bob)


# =============================================================================
# Test Data Fixtures
# =============================================================================
# These fixtures create database objects for specific tests.
# Each test gets a fresh, isolated set of data.


@pytest.fixture
async def test_subreddit(db_session: AsyncSession) -> Subreddits:
    """Create a test community in the database."""
    subreddit = Subreddits(name="python", description="All things Python", member_count=5)
    db_session.add(subreddit)
    await db_session.commit()
    await db_session.refresh(subreddit)
    return subreddit


@pytest.fixture
async def test_post(db_session: AsyncSession, test_subreddit: Subreddits) -> Posts:
    """
    Create a test post authored by Alice's display name.

    Usage:
        async def test_vote(test_post, client):
            assert test_post.votes == 0
    """
    post = Posts(
        title="Hello threads",
        content="First post",
        author_username="Alice",
        subreddit_id=test_subreddit.id,
    )
    db_session.add(post)
    await db_session.commit()
    await db_session.refresh(post)
    return post


@pytest.fixture
async def test_comment(db_session: AsyncSession, test_post: Posts) -> Comments:
    """
    Create a top-level comment by Alice on test_post.

    Inserted directly, so test_post.comment_count is not touched.
    """
    comment = Comments(
        post_id=test_post.id,
        content="Top-level comment",
        author_username="Alice",
        depth=0,
    )
    db_session.add(comment)
    await db_session.commit()
    await db_session.refresh(comment)
    return comment


# =============================================================================
# Sample Data Dictionaries (for API request payloads)
# =============================================================================


@pytest.fixture
def sample_post_data() -> dict:
    """Sample post payload in wire (camelCase) format."""
    return {
        "title": "A post about testing",
        "content": "Body text",
        "imageUrl": "https://example.com/cat.png",
        "linkUrl": "https://example.com",
    }
