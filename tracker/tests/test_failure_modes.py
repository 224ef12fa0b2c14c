"""
Failure Injection Tests.

Storage errors must reach the caller unchanged, and the API must turn them
into a 500 envelope.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from tracker.app.main import app
from tracker.app.db.session import get_db
from tracker.app.services.parcel_store import ParcelStore


@pytest.fixture
async def bare_session_factory():
    """Database without the parcel table."""
    bare_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield async_sessionmaker(bare_engine, class_=AsyncSession, expire_on_commit=False)
    await bare_engine.dispose()


@pytest.mark.asyncio
async def test_store_propagates_storage_errors(bare_session_factory, make_parcel):
    """Missing table surfaces as the engine's OperationalError."""
    async with bare_session_factory() as session:
        store = ParcelStore(session)

        with pytest.raises(OperationalError):
            await store.add(make_parcel())

        # Session is usable again after the failed write
        with pytest.raises(OperationalError):
            await store.delete(1)

        with pytest.raises(OperationalError):
            await store.get(1)


@pytest.mark.asyncio
async def test_api_storage_failure_returns_500(bare_session_factory):
    async def override_get_db():
        async with bare_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/v1/parcels/1")
    finally:
        app.dependency_overrides = {}

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_INTERNAL_SERVER"
