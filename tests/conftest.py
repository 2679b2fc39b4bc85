# ruff: noqa: E402
# IMPORTANT:
# 1) Set environment variables (DATABASE_URL etc.) first, then import application modules.
# 2) anyio_backend must be session-scoped to avoid ScopeMismatch.

from collections.abc import AsyncGenerator, Awaitable, Callable
import os
import tempfile

from asgi_lifespan import LifespanManager
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool


def _setup_test_environment() -> str:
    """Set environment variables for tests and return the final DATABASE_URL."""
    load_dotenv(".env.test", override=False)

    os.environ.setdefault("DB_CHECK_ON_START", "false")
    os.environ.setdefault("LOG_LEVEL", "INFO")

    # Priority: TEST_DATABASE_URL -> throwaway SQLite file
    test_dsn = os.getenv("TEST_DATABASE_URL")
    if not test_dsn:
        db_dir = tempfile.mkdtemp(prefix="blogpost-tests-")
        test_dsn = f"sqlite:///{os.path.join(db_dir, 'blogpost_test.db')}"

    os.environ["DATABASE_URL"] = test_dsn
    return test_dsn


TEST_DATABASE_URL = _setup_test_environment()


# These imports must come ONLY after DATABASE_URL is set
# isort: off
from app import create_app
from db.database import ASYNC_DATABASE_URL, Base, get_db
from db.models.post import Post
from db.repositories import post_repository
from tests.factories.posts import DEFAULT_SEED_COUNT, seed_posts

# isort: on


# NullPool avoids reusing connections across different event loops
test_async_engine = create_async_engine(ASYNC_DATABASE_URL, poolclass=NullPool)

TestAsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=test_async_engine,
    autoflush=True,
    expire_on_commit=False,
)


@pytest.fixture(scope="session")
def app():
    """FastAPI application instance for tests, created by factory."""
    return create_app()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def prepared_db() -> AsyncGenerator[None]:
    """Ensure the schema exists, then drop every post once the test is done."""
    async with test_async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with TestAsyncSessionLocal() as session:
        await post_repository.delete_all_posts(session)
        await session.commit()


@pytest.fixture
async def db_session(prepared_db: None) -> AsyncGenerator[AsyncSession]:
    """Fresh AsyncSession for each test."""
    async with TestAsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def seeded_posts(db_session: AsyncSession) -> list[Post]:
    """Insert random posts before the test, like the store would hold in production."""
    return await seed_posts(db_session, DEFAULT_SEED_COUNT)


@pytest.fixture
def find_post() -> Callable[[str], Awaitable[Post | None]]:
    """Look a post up by id through a brand new session, bypassing any identity map."""

    async def _find(post_id: str) -> Post | None:
        async with TestAsyncSessionLocal() as session:
            return await post_repository.get_post_by_id(session, post_id)

    return _find


@pytest.fixture
async def override_get_db(app):
    """Route the app's session dependency to the test database."""

    async def _get_db_test() -> AsyncGenerator[AsyncSession]:
        async with TestAsyncSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_test
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client(app, override_get_db: None, prepared_db: None) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client with app lifespan management for integration tests."""
    async with LifespanManager(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver.local",
            follow_redirects=True,
        ) as ac:
            yield ac


@pytest.fixture
async def unit_client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """Lightweight HTTP client for controller tests, without lifespan or schema setup."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver.local",
    ) as ac:
        yield ac
