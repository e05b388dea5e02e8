import pytest

from listing_flow.draft.policy import ReviewIncentive
from listing_flow.services.errors import DependentWriteFailed
from listing_flow.services.review_incentive_sync import build_review_incentive_settings, sync_review_incentive_settings


async def _listing_id(store):
    created = await store.create(
        "listings",
        {"user_id": "usr_alice", "title": "t", "description": "d", "category": "c", "location_address": "a"},
    )
    return created.first["id"]


def test_only_the_current_discount_is_kept():
    incentive = ReviewIncentive(enabled=True, discount_mode="amount", discount_percentage=10, discount_amount=5)
    data = build_review_incentive_settings("lst_1", "usr_alice", incentive)
    assert data["discount_percentage"] is None
    assert data["discount_amount"] == 5.0
    assert data["coupon_code_prefix"] == "REVIEW"
    assert data["facebook_page_url"] is None


def test_unlinked_platforms_fall_back_to_in_app():
    incentive = ReviewIncentive(enabled=True, platforms=["google", "facebook"])
    assert build_review_incentive_settings("lst_1", "usr_alice", incentive)["review_platforms"] == ["in_app"]

    linked = incentive.model_copy(update={"google_business_url": "https://g.page/plumber"})
    assert build_review_incentive_settings("lst_1", "usr_alice", linked)["review_platforms"] == ["google"]


@pytest.mark.asyncio
async def test_create_update_then_delete(store):
    listing_id = await _listing_id(store)
    key = {"listing_id": listing_id, "provider_id": "usr_alice"}
    incentive = ReviewIncentive(enabled=True, discount_percentage=10)

    assert await sync_review_incentive_settings(store, listing_id, "usr_alice", incentive) == "created"

    richer = incentive.model_copy(update={"discount_percentage": 20.0, "require_text_review": True})
    assert await sync_review_incentive_settings(store, listing_id, "usr_alice", richer) == "updated"

    rows = (await store.query("review_incentive_settings", key)).data
    assert len(rows) == 1
    assert rows[0]["discount_percentage"] == 20.0
    assert rows[0]["require_text_review"] is True

    off = ReviewIncentive(enabled=False)
    assert await sync_review_incentive_settings(store, listing_id, "usr_alice", off) == "deleted"
    assert (await store.query("review_incentive_settings", key)).data == []

    # nothing to delete is still fine
    assert await sync_review_incentive_settings(store, listing_id, "usr_alice", off) == "deleted"


@pytest.mark.asyncio
async def test_store_errors_become_dependent_write_failures(failing_store):
    store = failing_store("review_incentive_settings")
    with pytest.raises(DependentWriteFailed) as exc:
        await sync_review_incentive_settings(store, "lst_1", "usr_alice", ReviewIncentive(enabled=False))
    assert exc.value.message.startswith("Could not remove review incentive")
