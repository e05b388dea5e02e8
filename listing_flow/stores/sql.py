from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from listing_flow.models import Base, Listing, ReviewIncentiveSettings, ServiceSettings
from listing_flow.stores.base import StoreError, StoreResult

log = logging.getLogger(__name__)

_TABLES: dict[str, type[Base]] = {
    "listings": Listing,
    "service_settings": ServiceSettings,
    "review_incentive_settings": ReviewIncentiveSettings,
}


def _columns(model: type[Base]) -> set[str]:
    return {attr.key for attr in inspect(model).mapper.column_attrs}


def _row_to_dict(obj: Base, columns: Sequence[str] | None = None) -> dict[str, Any]:
    keys = columns or [attr.key for attr in inspect(type(obj)).mapper.column_attrs]
    return {k: getattr(obj, k) for k in keys}


def _where(model: type[Base], match: Mapping[str, Any]) -> list[Any]:
    # A list/tuple value matches any of its members
    out = []
    for k, v in match.items():
        col = getattr(model, k)
        out.append(col.in_(list(v)) if isinstance(v, (list, tuple)) else col == v)
    return out


def _db_error(e: SQLAlchemyError) -> StoreError:
    orig = getattr(e, "orig", None)
    return StoreError(
        message=type(orig or e).__name__,
        details=str(orig or e).splitlines()[0] if str(orig or e) else None,
        code=getattr(e, "code", None),
    )


class SqlRecordStore:
    """
    Record store over our own database (async SQLAlchemy).

    One session per call; every call commits or rolls back on its own so a
    failed dependent write never undoes the primary one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _resolve(self, table: str, keys: Sequence[str]) -> tuple[type[Base] | None, StoreError | None]:
        model = _TABLES.get(table)
        if model is None:
            return None, StoreError(message=f'relation "{table}" does not exist', code="42P01")
        unknown = sorted(set(keys) - _columns(model))
        if unknown:
            return None, StoreError(
                message=f"Could not find the '{unknown[0]}' column of '{table}'",
                details=f"unknown columns: {', '.join(unknown)}",
                code="PGRST204",
            )
        return model, None

    async def create(self, table: str, payload: Mapping[str, Any]) -> StoreResult:
        model, err = self._resolve(table, list(payload))
        if err:
            return StoreResult(error=err)

        async with self._session_factory() as db:
            try:
                obj = model(**dict(payload))
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
            except SQLAlchemyError as e:
                await db.rollback()
                log.warning("insert into %s failed: %s", table, e)
                return StoreResult(error=_db_error(e))
            return StoreResult(data=[_row_to_dict(obj)])

    async def update(self, table: str, payload: Mapping[str, Any], match: Mapping[str, Any]) -> StoreResult:
        model, err = self._resolve(table, [*payload, *match])
        if err:
            return StoreResult(error=err)

        async with self._session_factory() as db:
            try:
                stmt = select(model).where(*_where(model, match))
                rows = list((await db.execute(stmt)).scalars().all())
                for obj in rows:
                    for k, v in payload.items():
                        setattr(obj, k, v)
                await db.commit()
                for obj in rows:
                    await db.refresh(obj)
            except SQLAlchemyError as e:
                await db.rollback()
                log.warning("update of %s failed: %s", table, e)
                return StoreResult(error=_db_error(e))
            return StoreResult(data=[_row_to_dict(obj) for obj in rows])

    async def query(
        self,
        table: str,
        match: Mapping[str, Any],
        columns: Sequence[str] | None = None,
    ) -> StoreResult:
        model, err = self._resolve(table, [*match, *(columns or [])])
        if err:
            return StoreResult(error=err)

        async with self._session_factory() as db:
            try:
                stmt = select(model).where(*_where(model, match))
                rows = (await db.execute(stmt)).scalars().all()
            except SQLAlchemyError as e:
                log.warning("query of %s failed: %s", table, e)
                return StoreResult(error=_db_error(e))
            return StoreResult(data=[_row_to_dict(obj, columns) for obj in rows])

    async def delete(self, table: str, match: Mapping[str, Any]) -> StoreResult:
        model, err = self._resolve(table, list(match))
        if err:
            return StoreResult(error=err)

        async with self._session_factory() as db:
            try:
                stmt = select(model).where(*_where(model, match))
                rows = list((await db.execute(stmt)).scalars().all())
                deleted = [_row_to_dict(obj) for obj in rows]
                for obj in rows:
                    await db.delete(obj)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                log.warning("delete from %s failed: %s", table, e)
                return StoreResult(error=_db_error(e))
            return StoreResult(data=deleted)
