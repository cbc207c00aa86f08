"""
ExportDesk Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite database file (aiosqlite) with the
       schema created from the ORM metadata; API tests talk to the app
       through httpx's ASGITransport with the session dependency pointed at
       that database.

Fixture Hierarchy (all function-scoped):
    ├── engine:             async engine on <tmp_path>/exportdesk.db
    │   └── session_factory
    │       ├── db_session:  one AsyncSession for service tests
    │       └── test_client: httpx AsyncClient, get_db_session overridden
    ├── temp_storage:       temporary storage root for FileService tests
    └── sample_image_bytes: tiny JPEG payload for upload tests

A file database (not :memory:) is used so two sessions can interleave on
the same data, which the variant concurrency tests rely on.
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway locations
# BEFORE anything from `app` is imported.
_TEST_ROOT = tempfile.mkdtemp(prefix="exportdesk_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/app.db"
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_ROOT, "storage")
os.environ["PUBLIC_BASE_URL"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db_session  # noqa: E402
from app.models.customer import ExportCustomer  # noqa: E402,F401
from app.models.customer_product import CustomerProductPrice  # noqa: E402,F401
from app.models.freight_rate import FreightRate  # noqa: E402,F401
from app.models.product import Product  # noqa: E402,F401
from app.models.usd_rate import UsdRate  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh database with every table created."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'exportdesk.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    A session for service-level tests.

    Usage:
        async def test_get_missing(db_session):
            with pytest.raises(NotFoundError):
                await product_service.get_product(db_session, 999)
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# File Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    """A fresh storage root for FileService tests."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: Start of Image + JFIF header + End of Image."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient wired to the FastAPI app and the per-test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
