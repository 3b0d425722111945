"""Shared test fixtures.

Postgres is replaced by a throwaway SQLite file per test (aiosqlite driver).
NullPool keeps every connection on the event loop that opened it, which
matters because TestClient runs each request on its own loop.
"""

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.base import Base
from app.core.config import settings
from app.core.db import get_session, _import_models
from app.main import app
from app.platform.adapters.bus_memory import InMemoryNotificationBus
from app.platform.adapters.storage_local import LocalFilesystemStorage
from app.platform.provider_registry import get_notification_bus, get_object_storage

_import_models()

TENANT_ID = uuid.UUID(settings.DEFAULT_TENANT_ID)
COMPANY_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")
FARM_ID = uuid.UUID("00000000-0000-0000-0000-0000000000f1")


async def _create_schema(url: str) -> None:
    engine = create_async_engine(url, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def session(db_url):
    """AsyncSession on a fresh schema, for service-level tests."""
    await _create_schema(db_url)
    engine = create_async_engine(db_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as s:
        yield s
    await engine.dispose()


@pytest.fixture
def storage(tmp_path) -> LocalFilesystemStorage:
    return LocalFilesystemStorage(root=str(tmp_path / "media"))


@pytest.fixture
def bus() -> InMemoryNotificationBus:
    return InMemoryNotificationBus()


@pytest.fixture
def client(db_url, storage, bus):
    """TestClient wired to SQLite, local storage and the in-memory bus."""
    asyncio.run(_create_schema(db_url))
    engine = create_async_engine(db_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def _session():
        async with factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_object_storage] = lambda: storage
    app.dependency_overrides[get_notification_bus] = lambda: bus
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def animal_payload() -> dict:
    return {
        "company_id": str(COMPANY_ID),
        "farm_id": str(FARM_ID),
        "species": "CATTLE",
        "breed": "Brahman",
        "sex": "FEMALE",
        "tag_number": "BRH-001",
        "age_months": 30,
    }


@pytest.fixture
def animal(client, animal_payload) -> dict:
    resp = client.post("/api/v1/animals", json=animal_payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
