import os

# Must be set before app.core.config is imported.
os.environ.setdefault("ADMIN_CODE", "test-admin-code")
os.environ.setdefault("ADMIN_COOKIE_SECURE", "false")
os.environ.setdefault("ADMIN_LOGIN_RATE_LIMIT", "0")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

import pytest
import httpx

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Import Base + all models so metadata is complete
from app.models.base import Base
from app.models.builder import Builder  # noqa: F401
from app.models.listing import Listing  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401

from app.main import app
from app.core.db import get_db

from tests.fixtures_seed import pending_listing, pending_queue  # noqa: F401

ADMIN_CODE = os.environ["ADMIN_CODE"]


def _test_db_url() -> str:
    # Postgres when provided, otherwise a private in-memory SQLite per test
    return os.getenv("DATABASE_URL_TEST", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def async_engine():
    url = _test_db_url()
    if url.startswith("sqlite"):
        engine = create_async_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    else:
        engine = create_async_engine(url, pool_pre_ping=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    session_factory = async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession):
    """
    HTTP client that uses the test DB session via dependency override.
    """
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(client: httpx.AsyncClient):
    r = await client.post("/v1/admin", json={"code": ADMIN_CODE})
    assert r.status_code == 200, r.text
    return client
