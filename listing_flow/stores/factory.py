from __future__ import annotations

from functools import lru_cache

from listing_flow.core.config import settings
from listing_flow.core.db import SessionLocal
from listing_flow.stores.base import RecordStore
from listing_flow.stores.rest import RestRecordStore
from listing_flow.stores.sql import SqlRecordStore


@lru_cache(maxsize=1)
def _configured_store() -> RecordStore:
    if settings.store_backend == "rest":
        return RestRecordStore.from_settings(settings)
    return SqlRecordStore(SessionLocal)


def get_store() -> RecordStore:
    # FastAPI dependency; tests override it
    return _configured_store()
