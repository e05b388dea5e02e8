from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Type

from pydantic import BaseModel, ValidationError

from listing_flow.core.config import Settings, settings as default_settings
from listing_flow.core.ids import positional_id
from listing_flow.draft.listing import ListingDraft, ListingLocation
from listing_flow.draft.policy import CancellationPolicy, ReviewIncentive
from listing_flow.draft.pricing import PriceListItem, normalize_currency
from listing_flow.draft.registry import (
    default_budget_type,
    is_budget_type_legal,
    legal_budget_types,
    resolve_variant,
    variant_columns,
)
from listing_flow.draft.scheduling import AvailabilityPeriod, BookingSetup, TimeSlot
from listing_flow.draft.variants import GatedContentVariant, VariantBase
from listing_flow.services.field_parsing import (
    clean_text,
    format_number,
    format_timestamp,
    normalize_calendar_date,
    parse_array_field,
    parse_timestamp,
    to_number,
)
from listing_flow.services.photos import normalize_photo_urls, persistable_photos

log = logging.getLogger(__name__)


# --- draft -> primary record ---

def _variant_payload(variant: VariantBase) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, value in variant.column_values().items():
        if name in variant.money_fields:
            out[name] = to_number(value)
        elif name in variant.timestamp_fields:
            out[name] = parse_timestamp(value)
        elif isinstance(value, str):
            out[name] = clean_text(value)
        else:
            out[name] = value

    if isinstance(variant, GatedContentVariant):
        out["content_tiers"] = [
            {
                "name": t.name.strip(),
                "price": to_number(t.price),
                "billing_cycle": t.billing_cycle,
                "description": t.description.strip(),
                "features": list(t.features),
            }
            for t in variant.content_tiers
        ]
    return out


def build_listing_payload(
    draft: ListingDraft,
    *,
    now: datetime,
    settings: Settings = default_settings,
) -> dict[str, Any]:
    """
    Primary listing record for a draft.

    Strings are trimmed, money text becomes float (or None), arrays are always
    present, local photo previews are dropped and a bad preferred date becomes
    None. Columns of every inactive variant are written as null so that a
    listing-type switch does not leave stale values behind.
    """
    loc = draft.location
    is_rental = draft.listing_type == "rental"

    payload: dict[str, Any] = {
        "title": draft.title.strip(),
        "description": draft.description.strip(),
        "category": draft.category.strip(),
        "listing_type": draft.listing_type,
        "tags": list(draft.tags),
        "photos": persistable_photos(draft.photos),
        "budget_type": draft.budget_type,
        "budget_min": to_number(draft.budget_min),
        "budget_max": to_number(draft.budget_max),
        "currency": normalize_currency(draft.currency, settings.default_currency),
        "price_list": [
            {"id": item.id, "service_name": item.service_name.strip(), "price": to_number(item.price)}
            for item in draft.price_list
        ],
        "urgency": draft.urgency or None,
        "preferred_date": normalize_calendar_date(draft.preferred_date),
        "location_address": loc.location_address.strip(),
        "location_lat": loc.location_lat,
        "location_lng": loc.location_lng,
        "show_exact_address": loc.show_exact_address,
        "street_address": clean_text(loc.street_address),
        "city": clean_text(loc.city),
        "state": clean_text(loc.state),
        "postal_code": clean_text(loc.postal_code),
        "country": clean_text(loc.country),
        "location_notes": clean_text(loc.location_notes),
        "status": "active",
        "expires_at": now + timedelta(days=settings.listing_ttl_days),
        "booking_enabled": draft.booking.booking_enabled,
        "service_name": clean_text(draft.booking.service_name),
        "time_slots": [] if is_rental else [s.model_dump(by_alias=True) for s in draft.booking.time_slots],
        "rental_availability_periods": (
            [p.model_dump(by_alias=True) for p in draft.booking.availability_periods] if is_rental else []
        ),
    }

    payload.update({col: None for col in variant_columns()})
    payload.update(_variant_payload(draft.variant))
    return payload


# --- persisted record -> draft ---

def _parse_items(raw: Any, model: Type[BaseModel], id_prefix: str) -> list[Any]:
    items: list[Any] = []
    for i, entry in enumerate(parse_array_field(raw)):
        if not isinstance(entry, Mapping):
            log.warning("skipping malformed %s entry at %d", id_prefix, i)
            continue
        data = dict(entry)
        if not data.get("id"):
            data["id"] = positional_id(id_prefix, i)
        try:
            items.append(model.model_validate(data))
        except ValidationError:
            log.warning("skipping invalid %s entry at %d", id_prefix, i)
    return items


def _text_list(raw: Any) -> list[str]:
    return [str(v) for v in parse_array_field(raw) if v is not None and str(v).strip()]


def _safe(model: Type[BaseModel], data: Mapping[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        log.warning("falling back to defaults for %s (%d errors)", model.__name__, e.error_count())
        return model()


def _variant_from_record(listing_type: str, record: Mapping[str, Any]) -> VariantBase:
    model = resolve_variant(listing_type)
    data: dict[str, Any] = {}
    for name in model.model_fields:
        if name == "kind" or name not in record:
            continue
        value = record[name]
        if name in model.money_fields:
            value = format_number(value)
        elif name in model.timestamp_fields:
            value = format_timestamp(value)
        elif name == "content_tiers":
            value = [t for t in parse_array_field(value) if isinstance(t, Mapping)]
        elif model.model_fields[name].annotation == list[str]:
            value = _text_list(value)
        data[name] = value
    return _safe(model, data)


def _policy_from_record(raw: Any) -> CancellationPolicy:
    if not isinstance(raw, Mapping):
        return CancellationPolicy()
    pct = to_number(raw.get("cancellation_fee_percentage"))
    amt = to_number(raw.get("cancellation_fee_amount"))
    hours = raw.get("cancellation_hours")
    return _safe(
        CancellationPolicy,
        {
            "cancellation_hours": 24 if hours is None else hours,
            "cancellation_fee_enabled": bool(raw.get("cancellation_fee_enabled")),
            "fee_mode": "amount" if amt and not pct else "percentage",
            "fee_percentage": pct or 0.0,
            "fee_amount": amt or 0.0,
            "refund_policy": raw.get("refund_policy") or "full",
        },
    )


def _incentive_from_record(raw: Any) -> ReviewIncentive:
    if not isinstance(raw, Mapping):
        return ReviewIncentive()
    pct = to_number(raw.get("discount_percentage"))
    amt = to_number(raw.get("discount_amount"))
    data: dict[str, Any] = {
        "enabled": bool(raw.get("enabled")),
        "discount_mode": "amount" if amt and not pct else "percentage",
        "discount_percentage": pct or 0.0,
        "discount_amount": amt or 0.0,
        "platforms": _text_list(raw.get("review_platforms")) or ["in_app"],
    }
    for src, dst in (
        ("incentive_type", "incentive_type"),
        ("min_rating", "min_rating"),
        ("require_text_review", "require_text_review"),
        ("max_uses_per_customer", "max_uses_per_customer"),
        ("auto_generate_coupon", "auto_generate_coupon"),
        ("coupon_code_prefix", "coupon_prefix"),
        ("coupon_valid_days", "coupon_valid_days"),
        ("incentive_message", "message"),
        ("facebook_page_id", "facebook_page_id"),
        ("facebook_page_url", "facebook_page_url"),
        ("google_place_id", "google_place_id"),
        ("google_business_url", "google_business_url"),
    ):
        if raw.get(src) is not None:
            data[dst] = raw[src]
    return _safe(ReviewIncentive, data)


def draft_from_record(record: Mapping[str, Any], *, base_url: str) -> ListingDraft:
    """
    Rebuild a draft from a persisted listing (plus the nested
    `service_settings` / `review_incentive_settings` the edit loader attaches).

    Total: malformed columns fall back to defaults, list items without an id
    get a positional one, so the same record always yields the same draft.
    """
    listing_type = record.get("listing_type") or "service"
    try:
        resolve_variant(listing_type)
    except KeyError:
        log.warning("unknown listing type %r on record %s, loading as service", listing_type, record.get("id"))
        listing_type = "service"

    budget_type = record.get("budget_type") or default_budget_type(listing_type)
    if not is_budget_type_legal(listing_type, budget_type):
        budget_type = default_budget_type(listing_type)

    location = _safe(
        ListingLocation,
        {
            "location_address": record.get("location_address"),
            "location_lat": to_number(record.get("location_lat")),
            "location_lng": to_number(record.get("location_lng")),
            "show_exact_address": bool(record.get("show_exact_address")),
            "street_address": record.get("street_address"),
            "city": record.get("city"),
            "state": record.get("state"),
            "postal_code": record.get("postal_code"),
            "country": record.get("country"),
            "location_notes": record.get("location_notes"),
        },
    )

    booking = BookingSetup(
        booking_enabled=bool(record.get("booking_enabled")),
        service_name=record.get("service_name") or "",
        time_slots=_parse_items(record.get("time_slots"), TimeSlot, "slot"),
        availability_periods=_parse_items(record.get("rental_availability_periods"), AvailabilityPeriod, "period"),
    )

    urgency = record.get("urgency")
    if urgency not in ("asap", "this_week", "flexible"):
        urgency = None

    return ListingDraft(
        id=record.get("id"),
        user_id=record.get("user_id"),
        title=record.get("title") or "",
        description=record.get("description") or "",
        category=record.get("category") or "",
        tags=_text_list(record.get("tags")),
        photos=normalize_photo_urls(parse_array_field(record.get("photos")), base_url),
        location=location,
        urgency=urgency,
        preferred_date=normalize_calendar_date(record.get("preferred_date")) or "",
        budget_type=budget_type,
        budget_min=format_number(record.get("budget_min")),
        budget_max=format_number(record.get("budget_max")),
        currency=normalize_currency(record.get("currency")),
        price_list=_parse_items(record.get("price_list"), PriceListItem, "price"),
        variant=_variant_from_record(listing_type, record),
        booking=booking,
        policy=_policy_from_record(record.get("service_settings")),
        review_incentive=_incentive_from_record(record.get("review_incentive_settings")),
    )


def iter_submit_blockers(draft: ListingDraft) -> Iterable[str]:
    # Checked again at submission time: hard-required fields, then the pricing type
    if not draft.title.strip():
        yield "Title is required"
    if not draft.description.strip():
        yield "Description is required"
    if not draft.category.strip():
        yield "Category is required"
    if not draft.location.location_address.strip():
        yield "Location address is required"
    if not is_budget_type_legal(draft.listing_type, draft.budget_type):
        allowed = ", ".join(legal_budget_types(draft.listing_type))
        yield f"Pricing type must be one of: {allowed}"
