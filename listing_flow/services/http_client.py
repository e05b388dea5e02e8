from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

import httpx


HttpMethod = Literal["GET", "POST", "PATCH", "DELETE"]


@dataclass(frozen=True)
class HttpResult:
    ok: bool
    status_code: int | None
    # Parsed JSON body (object or array) or {"raw": ...} for anything else
    body: Any

    error_code: str | None = None
    error_message: str | None = None

    elapsed_ms: int | None = None


def _is_json_response(resp: httpx.Response) -> bool:
    ct = (resp.headers.get("content-type") or "").lower()
    return "application/json" in ct or ct.endswith("+json")


def _cap_text(s: str, *, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"...(truncated, {len(s)} chars)"


class HttpClient:
    """
    Shared HTTP client for the hosted record store.

    - One AsyncClient (connection pooling).
    - No retries: submission attempts each write exactly once.
    - Transport errors come back as a failed HttpResult, never raised.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 15.0,
        max_response_body_chars: int = 20_000,
        default_headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._max_body = max_response_body_chars
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers=dict(default_headers or {}),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request_json(
        self,
        *,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> HttpResult:
        try:
            resp = await self._client.request(
                method=method,
                url=url,
                headers=dict(headers or {}),
                params=dict(params or {}),
                json=json_body,
            )
        except httpx.TimeoutException as e:
            return HttpResult(ok=False, status_code=None, body={"error": "timeout"}, error_code="TIMEOUT", error_message=str(e))
        except httpx.RequestError as e:
            # DNS errors, connection refused, TLS, etc.
            return HttpResult(
                ok=False,
                status_code=None,
                body={"error": "request_error"},
                error_code="REQUEST_ERROR",
                error_message=str(e) or type(e).__name__,
            )

        body: Any
        if _is_json_response(resp):
            try:
                body = resp.json()
            except ValueError:
                body = {"raw": _cap_text(resp.text, max_chars=self._max_body)}
        elif resp.content:
            body = {"raw": _cap_text(resp.text, max_chars=self._max_body)}
        else:
            body = None

        try:
            elapsed_ms = int(resp.elapsed.total_seconds() * 1000)
        except RuntimeError:
            # elapsed is only set once the response is closed
            elapsed_ms = None

        if 200 <= resp.status_code < 300:
            return HttpResult(ok=True, status_code=resp.status_code, body=body, elapsed_ms=elapsed_ms)

        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            body=body,
            error_code=f"HTTP_{resp.status_code}",
            error_message=f"HTTP {resp.status_code}",
            elapsed_ms=elapsed_ms,
        )
