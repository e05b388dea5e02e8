import json
from datetime import datetime, timezone

import httpx
import pytest

from listing_flow.services.auth import CurrentUser, StaticAuthProvider
from listing_flow.services.errors import PrimaryWriteFailed
from listing_flow.services.http_client import HttpClient
from listing_flow.services.submission import ListingSubmitter
from listing_flow.stores.rest import RestRecordStore


def _rest_store(handler):
    client = HttpClient(base_url="http://records.test", transport=httpx.MockTransport(handler))
    return RestRecordStore(client, api_key="anon-key")


@pytest.mark.asyncio
async def test_query_builds_postgrest_filters():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "lst_1"}])

    store = _rest_store(handler)
    res = await store.query("listings", {"user_id": "usr_alice", "status": ["active", "matched"], "deleted_at": None}, columns=["id"])
    await store.aclose()

    assert res.ok
    assert res.data == [{"id": "lst_1"}]

    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/rest/v1/listings"
    assert req.url.params["user_id"] == "eq.usr_alice"
    assert req.url.params["status"] == "in.(active,matched)"
    assert req.url.params["deleted_at"] == "is.null"
    assert req.url.params["select"] == "id"
    assert req.headers["apikey"] == "anon-key"
    assert req.headers["authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_create_serializes_datetimes_and_asks_for_representation():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=[{"id": "lst_9", **json.loads(request.content)}])

    store = _rest_store(handler)
    expires = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)
    res = await store.create("listings", {"title": "Fix sink", "expires_at": expires})

    assert res.first["id"] == "lst_9"
    assert res.first["expires_at"].startswith("2026-03-31T12:00:00")
    assert seen[0].method == "POST"
    assert seen[0].headers["prefer"] == "return=representation"


@pytest.mark.asyncio
async def test_error_body_is_passed_through():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={
                "message": "new row violates row-level security policy",
                "details": "Failing row contains (...)",
                "hint": None,
                "code": "42501",
            },
        )

    res = await _rest_store(handler).update("listings", {"title": "x"}, {"id": "lst_1"})

    assert not res.ok
    assert res.error.code == "42501"
    assert res.error.details == "Failing row contains (...)"


@pytest.mark.asyncio
async def test_transport_failure_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    res = await _rest_store(handler).delete("review_incentive_settings", {"listing_id": "lst_1"})

    assert not res.ok
    assert res.error.code == "REQUEST_ERROR"


@pytest.mark.asyncio
async def test_submission_surfaces_message_and_details(make_draft):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={"message": "duplicate key value", "details": "Key (id) already exists.", "hint": None, "code": "23505"},
        )

    submitter = ListingSubmitter(
        _rest_store(handler),
        StaticAuthProvider(CurrentUser(id="usr_alice")),
        clock=lambda: datetime(2026, 3, 1, tzinfo=timezone.utc),
    )
    result = await submitter.submit(make_draft(), "create")

    assert isinstance(result.error, PrimaryWriteFailed)
    assert result.error.user_message() == "duplicate key value: Key (id) already exists."


@pytest.mark.asyncio
async def test_submission_rejects_a_reply_without_the_row(make_draft):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, text="Created", headers={"content-type": "text/plain"})

    submitter = ListingSubmitter(
        _rest_store(handler),
        StaticAuthProvider(CurrentUser(id="usr_alice")),
        clock=lambda: datetime(2026, 3, 1, tzinfo=timezone.utc),
    )
    result = await submitter.submit(make_draft(), "create")

    assert isinstance(result.error, PrimaryWriteFailed)
    assert result.error.code == "NO_ID"
