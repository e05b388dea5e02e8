from __future__ import annotations

import logging
from typing import Any

from listing_flow.draft.policy import ReviewIncentive
from listing_flow.services.errors import DependentWriteFailed
from listing_flow.services.field_parsing import clean_text
from listing_flow.stores.base import RecordStore

log = logging.getLogger(__name__)

TABLE = "review_incentive_settings"


def build_review_incentive_settings(listing_id: str, provider_id: str, incentive: ReviewIncentive) -> dict[str, Any]:
    pct, amt = incentive.current_discount()
    return {
        "provider_id": provider_id,
        "listing_id": listing_id,
        "enabled": True,
        "incentive_type": incentive.incentive_type,
        "discount_percentage": pct,
        "discount_amount": amt,
        "min_rating": incentive.min_rating,
        "require_text_review": incentive.require_text_review,
        "max_uses_per_customer": incentive.max_uses_per_customer,
        "auto_generate_coupon": incentive.auto_generate_coupon,
        "coupon_code_prefix": incentive.coupon_prefix.strip() or "REVIEW",
        "coupon_valid_days": incentive.coupon_valid_days,
        "incentive_message": incentive.message.strip() or None,
        "review_platforms": incentive.linked_platforms(),
        "facebook_page_id": clean_text(incentive.facebook_page_id),
        "facebook_page_url": clean_text(incentive.facebook_page_url),
        "google_place_id": clean_text(incentive.google_place_id),
        "google_business_url": clean_text(incentive.google_business_url),
    }


async def sync_review_incentive_settings(
    store: RecordStore,
    listing_id: str,
    provider_id: str,
    incentive: ReviewIncentive,
) -> str:
    """
    Keep the (listing, provider) incentive record in step with the draft.

    Disabled incentives delete the record so the listing cleanly goes back to
    having none. Returns "deleted", "created" or "updated".
    """
    key = {"listing_id": listing_id, "provider_id": provider_id}

    if not incentive.enabled:
        res = await store.delete(TABLE, key)
        if res.error:
            raise DependentWriteFailed.from_store_error(res.error, prefix="Could not remove review incentive")
        return "deleted"

    data = build_review_incentive_settings(listing_id, provider_id, incentive)

    existing = await store.query(TABLE, key, columns=["id"])
    if existing.error:
        raise DependentWriteFailed.from_store_error(existing.error, prefix="Could not read review incentive")

    if existing.data:
        res = await store.update(TABLE, data, key)
        outcome = "updated"
    else:
        res = await store.create(TABLE, data)
        outcome = "created"

    if res.error:
        raise DependentWriteFailed.from_store_error(res.error, prefix="Could not save review incentive")

    log.info("review incentive %s for listing %s", outcome, listing_id)
    return outcome
