from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from pydantic_core import to_jsonable_python

from listing_flow.core.config import Settings
from listing_flow.services.http_client import HttpClient, HttpResult
from listing_flow.stores.base import StoreError, StoreResult

log = logging.getLogger(__name__)


def _filter_value(v: Any) -> str:
    # PostgREST horizontal filtering operators
    if v is None:
        return "is.null"
    if isinstance(v, bool):
        return f"eq.{str(v).lower()}"
    if isinstance(v, (list, tuple)):
        return "in.(" + ",".join(str(x) for x in v) + ")"
    return f"eq.{v}"


def _filters(match: Mapping[str, Any]) -> dict[str, str]:
    return {k: _filter_value(v) for k, v in match.items()}


def _to_store_result(res: HttpResult, *, table: str, op: str) -> StoreResult:
    if res.ok:
        body = res.body
        if body is None:
            return StoreResult(data=[])
        if isinstance(body, list):
            return StoreResult(data=[r for r in body if isinstance(r, dict)])
        if isinstance(body, dict):
            return StoreResult(data=[body])
        return StoreResult(data=[])

    body = res.body if isinstance(res.body, dict) else {}
    err = StoreError(
        message=str(body.get("message") or res.error_message or "request failed"),
        details=body.get("details"),
        hint=body.get("hint"),
        code=str(body.get("code") or res.error_code or "") or None,
    )
    log.warning("%s on %s failed: %s (code=%s)", op, table, err.message, err.code)
    return StoreResult(error=err)


class RestRecordStore:
    """
    Record store backed by the hosted PostgREST API (`/rest/v1/<table>`).

    Error bodies already carry {message, details, hint, code}; they are passed
    through as StoreError unchanged.
    """

    def __init__(self, client: HttpClient, *, api_key: str):
        self._client = client
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Prefer": "return=representation",
        }

    @classmethod
    def from_settings(cls, settings: Settings, **client_kwargs: Any) -> "RestRecordStore":
        client = HttpClient(
            base_url=settings.rest_url.rstrip("/"),
            timeout_seconds=settings.store_timeout_seconds,
            **client_kwargs,
        )
        return cls(client, api_key=settings.rest_api_key.get_secret_value())

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _path(table: str) -> str:
        return f"/rest/v1/{table}"

    async def create(self, table: str, payload: Mapping[str, Any]) -> StoreResult:
        res = await self._client.request_json(
            method="POST",
            url=self._path(table),
            headers=self._headers,
            json_body=to_jsonable_python(dict(payload)),
        )
        return _to_store_result(res, table=table, op="insert")

    async def update(self, table: str, payload: Mapping[str, Any], match: Mapping[str, Any]) -> StoreResult:
        res = await self._client.request_json(
            method="PATCH",
            url=self._path(table),
            headers=self._headers,
            params=_filters(match),
            json_body=to_jsonable_python(dict(payload)),
        )
        return _to_store_result(res, table=table, op="update")

    async def query(
        self,
        table: str,
        match: Mapping[str, Any],
        columns: Sequence[str] | None = None,
    ) -> StoreResult:
        params = _filters(match)
        params["select"] = ",".join(columns) if columns else "*"
        res = await self._client.request_json(
            method="GET",
            url=self._path(table),
            headers=self._headers,
            params=params,
        )
        return _to_store_result(res, table=table, op="select")

    async def delete(self, table: str, match: Mapping[str, Any]) -> StoreResult:
        res = await self._client.request_json(
            method="DELETE",
            url=self._path(table),
            headers=self._headers,
            params=_filters(match),
        )
        return _to_store_result(res, table=table, op="delete")
