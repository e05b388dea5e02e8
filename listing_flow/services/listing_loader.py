from __future__ import annotations

import logging
from typing import Any

from listing_flow.services.errors import StoreUnavailable
from listing_flow.stores.base import RecordStore

log = logging.getLogger(__name__)

CANCELLATION_COLUMNS = [
    "cancellation_hours",
    "cancellation_fee_enabled",
    "cancellation_fee_percentage",
    "cancellation_fee_amount",
    "refund_policy",
]


async def fetch_listing_for_edit(store: RecordStore, listing_id: str, user_id: str) -> dict[str, Any] | None:
    """
    The listing as the edit wizard loads it: the user's own row, with the
    cancellation settings and the review incentive nested under
    `service_settings` / `review_incentive_settings` (None when absent).

    Returns None when the listing does not exist or belongs to someone else.
    """
    res = await store.query("listings", {"id": listing_id, "user_id": user_id})
    if res.error:
        raise StoreUnavailable.from_store_error(res.error, prefix="Could not load listing")
    if not res.data:
        return None
    record = dict(res.first)

    # Missing or unreadable settings only mean the wizard starts from defaults
    settings_res = await store.query("service_settings", {"listing_id": listing_id}, columns=CANCELLATION_COLUMNS)
    if settings_res.error:
        log.warning("service settings for %s not loaded: %s", listing_id, settings_res.error.user_message())
    record["service_settings"] = settings_res.first if settings_res.ok else None

    incentive_res = await store.query(
        "review_incentive_settings", {"listing_id": listing_id, "provider_id": user_id}
    )
    if incentive_res.error:
        log.warning("review incentive for %s not loaded: %s", listing_id, incentive_res.error.user_message())
    record["review_incentive_settings"] = incentive_res.first if incentive_res.ok else None

    return record
