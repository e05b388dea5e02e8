from __future__ import annotations

import logging
from typing import Any, Iterable

from listing_flow.draft.listing import ListingDraft
from listing_flow.draft.pricing import normalize_currency
from listing_flow.draft.scheduling import WEEKDAYS, TimeSlot
from listing_flow.services.errors import DependentWriteFailed
from listing_flow.services.field_parsing import to_number
from listing_flow.stores.base import RecordStore

log = logging.getLogger(__name__)

TABLE = "service_settings"

DEFAULT_DAY_START = "09:00"
DEFAULT_DAY_END = "17:00"
DEFAULT_SERVICE_DURATION = 60
DEFAULT_SERVICE_PRICE = "50"


def derive_working_hours(slots: Iterable[TimeSlot]) -> dict[str, dict[str, Any]]:
    """
    Project weekly time slots onto one {enabled, start, end} window per day.

    Lossy: a day's window spans from its earliest slot start to its latest
    slot end, so gaps between slots (and disjoint slots) are not kept. Days
    without slots stay disabled with the default 09:00-17:00 window.
    """
    hours = {day: {"enabled": False, "start": DEFAULT_DAY_START, "end": DEFAULT_DAY_END} for day in WEEKDAYS}
    for slot in slots:
        day = hours.get(slot.day)
        if day is None:
            continue
        if not day["enabled"]:
            day.update(enabled=True, start=slot.start_time, end=slot.end_time)
            continue
        # zero-padded HH:MM compares correctly as text
        day["start"] = min(day["start"], slot.start_time)
        day["end"] = max(day["end"], slot.end_time)
    return hours


def derive_service_options(draft: ListingDraft) -> list[dict[str, Any]]:
    currency = normalize_currency(draft.currency)
    if draft.budget_type == "price_list" and draft.price_list:
        return [
            {
                "name": item.service_name.strip(),
                "duration": DEFAULT_SERVICE_DURATION,
                "price": to_number(item.price),
                "currency": currency,
            }
            for item in draft.price_list
        ]
    name = draft.booking.service_name.strip()
    if not name:
        return []
    return [
        {
            "name": name,
            "duration": DEFAULT_SERVICE_DURATION,
            "price": to_number(draft.budget_min.strip() or DEFAULT_SERVICE_PRICE),
            "currency": currency,
        }
    ]


def build_service_settings(listing_id: str, draft: ListingDraft) -> dict[str, Any]:
    fee_pct, fee_amt = draft.policy.current_fee()
    return {
        "listing_id": listing_id,
        "booking_enabled": draft.booking.booking_enabled,
        "service_type": "appointment",
        "default_duration_minutes": DEFAULT_SERVICE_DURATION,
        "buffer_minutes": 15,
        "advance_booking_days": 30,
        "same_day_booking": True,
        "auto_confirm": False,
        "cancellation_hours": draft.policy.cancellation_hours,
        "cancellation_fee_enabled": draft.policy.cancellation_fee_enabled,
        "cancellation_fee_percentage": fee_pct,
        "cancellation_fee_amount": fee_amt,
        "refund_policy": draft.policy.refund_policy,
        "working_hours": derive_working_hours(draft.booking.time_slots),
        "break_times": [],
        "service_options": derive_service_options(draft),
        "calendar_connected": False,
    }


async def sync_service_settings(store: RecordStore, listing_id: str, draft: ListingDraft) -> str:
    """
    Read-then-upsert the listing's service settings. Returns "created" or
    "updated"; raises DependentWriteFailed when the store rejects either call.
    """
    data = build_service_settings(listing_id, draft)

    existing = await store.query(TABLE, {"listing_id": listing_id}, columns=["id"])
    if existing.error:
        raise DependentWriteFailed.from_store_error(existing.error, prefix="Could not read booking settings")

    if existing.data:
        res = await store.update(TABLE, data, {"listing_id": listing_id})
        outcome = "updated"
    else:
        res = await store.create(TABLE, data)
        outcome = "created"

    if res.error:
        raise DependentWriteFailed.from_store_error(res.error, prefix="Could not save booking settings")

    log.info("service settings %s for listing %s", outcome, listing_id)
    return outcome
