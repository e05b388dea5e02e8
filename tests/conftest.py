import os

# Settings are read at import time; keep tests off real infrastructure
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["STORE_BACKEND"] = "sql"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from typing import Any, Mapping, Sequence

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from listing_flow.draft.listing import ListingDraft, ListingLocation
from listing_flow.main import app
from listing_flow.models import Base
from listing_flow.services.auth import CurrentUser, StaticAuthProvider
from listing_flow.stores.base import StoreError, StoreResult
from listing_flow.stores.factory import get_store
from listing_flow.stores.sql import SqlRecordStore


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'listings.db'}")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def store(session_factory):
    return SqlRecordStore(session_factory)


@pytest.fixture
def user():
    return CurrentUser(id="usr_alice")


@pytest.fixture
def auth(user):
    return StaticAuthProvider(user)


@pytest_asyncio.fixture
async def client(store):
    """
    HTTP client whose record store is the per-test sqlite store.
    """
    app.dependency_overrides[get_store] = lambda: store

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _make_draft(**overrides: Any) -> ListingDraft:
    data: dict[str, Any] = {
        "title": "Fix sink",
        "description": "Leaky pipe",
        "category": "Plumbing",
        "budget_type": "fixed",
        "budget_min": "50",
        "location": ListingLocation(location_address="10 Downing St"),
    }
    data.update(overrides)
    return ListingDraft(**data)


class FailingStore:
    """
    Wraps a store and rejects every call touching one of `fail_tables`.
    """

    def __init__(self, inner, fail_tables: set[str]):
        self._inner = inner
        self._fail = fail_tables
        self.error = StoreError(message="permission denied for table", details="row-level security", code="42501")

    def _rejects(self, table: str) -> bool:
        return table in self._fail

    async def create(self, table: str, payload: Mapping[str, Any]) -> StoreResult:
        if self._rejects(table):
            return StoreResult(error=self.error)
        return await self._inner.create(table, payload)

    async def update(self, table: str, payload: Mapping[str, Any], match: Mapping[str, Any]) -> StoreResult:
        if self._rejects(table):
            return StoreResult(error=self.error)
        return await self._inner.update(table, payload, match)

    async def query(self, table: str, match: Mapping[str, Any], columns: Sequence[str] | None = None) -> StoreResult:
        if self._rejects(table):
            return StoreResult(error=self.error)
        return await self._inner.query(table, match, columns)

    async def delete(self, table: str, match: Mapping[str, Any]) -> StoreResult:
        if self._rejects(table):
            return StoreResult(error=self.error)
        return await self._inner.delete(table, match)


@pytest.fixture
def make_draft():
    """Builds the plumbing draft used across tests; keyword args override its fields."""
    return _make_draft


@pytest.fixture
def failing_store(store):
    def _wrap(*tables: str) -> FailingStore:
        return FailingStore(store, set(tables))
    return _wrap
