"""
MapIt Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── sample_customer / sample_map / sample_zone / sample_order: transient ORM rows
    ├── app: fresh FastAPI app whose session dependency yields mock_db_session
    └── test_client: HTTPX AsyncClient bound to `app`
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Before any mapit import: tests never talk to a configured database
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_HOST", None)
os.environ["LOG_LEVEL"] = "WARNING"

from mapit.database import get_db_session  # noqa: E402
from mapit.main import create_app  # noqa: E402
from mapit.models import Customer, Map, Order, Zone  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def make_result(scalar=None, rows=None, scalars=None, row=None):
    """
    Build a mock SQLAlchemy Result.

    scalar:  returned by scalar_one() / scalar_one_or_none()
    rows:    list of dicts returned by mappings().all()
    row:     dict returned by mappings().one()
    scalars: list returned by scalars().all()
    """
    result = MagicMock()
    result.scalar_one.return_value = scalar
    result.scalar_one_or_none.return_value = scalar
    result.mappings.return_value.all.return_value = rows or []
    result.mappings.return_value.one.return_value = row
    result.scalars.return_value.all.return_value = scalars or []
    return result


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_zone(mock_db_session):
            mock_db_session.execute.return_value = make_result(scalar=zone)
            result = await zone_service.get_zone(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def created_at():
    return datetime(2025, 1, 20, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def sample_customer():
    return Customer(
        customer_id=7,
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        password_hash="x",
    )


@pytest.fixture
def sample_map(created_at):
    """A stored map row as returned by INSERT ... RETURNING."""
    return Map(
        map_id=12,
        title="Beirut districts",
        description="",
        country="",
        customer_id=7,
        active=True,
        created_at=created_at,
        map_data=None,
        map_bounds=None,
        map_code=None,
    )


@pytest.fixture
def sample_zone(created_at):
    return Zone(
        zone_id=3,
        map_id=12,
        customer_id=7,
        name="Hamra",
        color="#ff0000",
        coordinates=[[35.48, 33.89], [35.49, 33.89], [35.49, 33.90]],
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def sample_order(created_at):
    """A stored order row as returned by INSERT ... RETURNING."""
    return Order(
        id=5,
        customer_id=7,
        package_id=2,
        date_time=created_at,
        total=5.0,
        status="pending",
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def order_row(created_at):
    """One row of the order listing query."""
    return {
        "id": 5,
        "customer_id": 7,
        "package_id": 2,
        "date_time": created_at,
        "total": 5.0,
        "status": "pending",
        "created_at": created_at,
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
        "package_name": "starter",
        "package_price": 5.0,
    }


@pytest.fixture
def listing_row(created_at):
    """One row of the GET /maps listing query."""
    return {
        "map_id": 12,
        "title": "Beirut districts",
        "description": "",
        "country": "Lebanon",
        "active": True,
        "created_at": created_at,
        "customer_id": 7,
        "customer_name": "Ada Lovelace",
        "zone_count": 2,
    }


@pytest.fixture
def app(mock_db_session):
    """
    Fresh application per test.

    The lifespan does not run under ASGITransport, so no pool is created;
    routes get `mock_db_session` through the dependency override.
    """
    application = create_app()

    async def override_session():
        yield mock_db_session

    application.dependency_overrides[get_db_session] = override_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    raise_app_exceptions=False: the catch-all handler's 500 is returned to the
    client instead of re-raised into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
