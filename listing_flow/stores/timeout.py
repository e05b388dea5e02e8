from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from listing_flow.stores.base import RecordStore, StoreError, StoreResult

log = logging.getLogger(__name__)


class TimeoutRecordStore:
    """
    Bounds every call of the wrapped store. A call that overruns is cancelled
    and reported as a store error, exactly like a rejected write.
    """

    def __init__(self, inner: RecordStore, timeout_seconds: float):
        self._inner = inner
        self._timeout = timeout_seconds

    async def _bounded(self, op: str, table: str, coro) -> StoreResult:
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError:
            log.warning("%s on %s timed out after %.1fs", op, table, self._timeout)
            return StoreResult(
                error=StoreError(
                    message="Request timed out",
                    details=f"{op} on {table} took longer than {self._timeout:g}s",
                    code="TIMEOUT",
                )
            )

    async def create(self, table: str, payload: Mapping[str, Any]) -> StoreResult:
        return await self._bounded("insert", table, self._inner.create(table, payload))

    async def update(self, table: str, payload: Mapping[str, Any], match: Mapping[str, Any]) -> StoreResult:
        return await self._bounded("update", table, self._inner.update(table, payload, match))

    async def query(
        self,
        table: str,
        match: Mapping[str, Any],
        columns: Sequence[str] | None = None,
    ) -> StoreResult:
        return await self._bounded("select", table, self._inner.query(table, match, columns))

    async def delete(self, table: str, match: Mapping[str, Any]) -> StoreResult:
        return await self._bounded("delete", table, self._inner.delete(table, match))
