from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

from listing_flow.draft.listing import ListingDraft
from listing_flow.draft.registry import is_budget_type_legal, legal_budget_types
from listing_flow.draft.variants import (
    AuctionVariant,
    FundraisingVariant,
    GatedContentVariant,
    GoodsVariant,
    LinkVariant,
    RentalVariant,
    SpaceSharingVariant,
)
from listing_flow.services.field_parsing import to_number


class Step(IntEnum):
    BASIC_INFO = 1
    PRICING = 2
    BOOKING = 3
    LOCATION = 4
    SETTINGS = 5
    REVIEW = 6


FULL_FLOW: tuple[Step, ...] = (Step.BASIC_INFO, Step.PRICING, Step.BOOKING, Step.LOCATION, Step.SETTINGS, Step.REVIEW)
BASIC_FLOW: tuple[Step, ...] = (Step.BASIC_INFO, Step.PRICING, Step.LOCATION, Step.REVIEW)

FLOWS: dict[str, tuple[Step, ...]] = {"full": FULL_FLOW, "basic": BASIC_FLOW}

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class StepResult:
    ok: bool
    next_step: Step | None = None
    reason: str | None = None
    ready_to_submit: bool = False


# A rule returns a user-facing reason when the draft cannot leave the step
Rule = Callable[[ListingDraft], "str | None"]


def _blank(v: str) -> bool:
    return not v.strip()


# --- basic info ---

def _require_basic_info(d: ListingDraft) -> str | None:
    if _blank(d.title) or _blank(d.description) or _blank(d.category):
        return "Please fill in all required fields"
    return None


# --- pricing ---

def _require_legal_budget_type(d: ListingDraft) -> str | None:
    if not is_budget_type_legal(d.listing_type, d.budget_type):
        allowed = ", ".join(legal_budget_types(d.listing_type))
        return f"Pricing type must be one of: {allowed}"
    return None


def _require_budget(d: ListingDraft) -> str | None:
    bt = d.budget_type
    if bt in ("fixed", "per_project", "per_hour", "hourly"):
        if _blank(d.budget_min):
            return "Please enter a price"
        return None
    if bt == "range":
        if _blank(d.budget_min) or _blank(d.budget_max):
            return "Please enter both minimum and maximum price"
        lo, hi = to_number(d.budget_min), to_number(d.budget_max)
        if lo is None or hi is None:
            return "Prices must be numbers"
        if lo >= hi:
            return "Maximum price must be greater than minimum price"
        return None
    if bt == "price_list":
        if not d.price_list:
            return "Please add at least one service to your price list"
        for item in d.price_list:
            if _blank(item.service_name) or _blank(item.price):
                return "Please fill in all service names and prices"
        return None
    if bt == "auction":
        v = d.variant
        if not isinstance(v, (AuctionVariant, GoodsVariant)) or _blank(v.auction_start_price):
            return "Please enter a starting price for the auction"
        return None
    return None


def _require_rental_rate(d: ListingDraft) -> str | None:
    v = d.variant
    if isinstance(v, RentalVariant) and _blank(v.rate_for_duration()):
        return f"Please enter a {v.rental_duration_type} rental rate"
    return None


def _require_space_rate(d: ListingDraft) -> str | None:
    v = d.variant
    if isinstance(v, SpaceSharingVariant) and _blank(v.space_hourly_rate) and _blank(v.space_daily_rate):
        return "Please enter an hourly or daily rate"
    return None


def _require_fundraising_goal(d: ListingDraft) -> str | None:
    v = d.variant
    if isinstance(v, FundraisingVariant) and _blank(v.fundraising_goal):
        return "Please enter a fundraising goal"
    return None


def _require_link_url(d: ListingDraft) -> str | None:
    v = d.variant
    if isinstance(v, LinkVariant) and _blank(v.link_url):
        return "Please enter the link URL"
    return None


def _require_content_tier(d: ListingDraft) -> str | None:
    v = d.variant
    if not isinstance(v, GatedContentVariant):
        return None
    if not any(not _blank(t.name) and not _blank(t.price) for t in v.content_tiers):
        return "Please add at least one content tier with a name and price"
    return None


# --- booking ---

def _check_time_slots(d: ListingDraft) -> str | None:
    for slot in d.booking.time_slots:
        if not _HHMM.match(slot.start_time) or not _HHMM.match(slot.end_time):
            return "Time slots need a start and end time (HH:MM)"
        # zero-padded HH:MM compares correctly as text
        if slot.start_time >= slot.end_time:
            return "Time slot end time must be after its start time"
    return None


def _require_time_slots(d: ListingDraft) -> str | None:
    if d.booking.booking_enabled and not d.booking.time_slots:
        return "Please add at least one available time slot"
    return _check_time_slots(d)


def _require_availability_periods(d: ListingDraft) -> str | None:
    if d.booking.booking_enabled and not d.booking.availability_periods:
        return "Please add at least one availability period"
    return None


# --- location ---

def _require_location(d: ListingDraft) -> str | None:
    loc = d.location
    if _blank(loc.location_address):
        return "Please enter a location"
    if loc.show_exact_address and (
        _blank(loc.street_address) or _blank(loc.city) or _blank(loc.postal_code) or _blank(loc.country)
    ):
        return "Please fill in the full address (street, city, postal code, country)"
    return None


_PRICING_STANDARD: tuple[Rule, ...] = (_require_legal_budget_type, _require_budget)

# (step, listing_type) -> rules; listing_type None is the fallback for the step
_RULES: dict[tuple[Step, str | None], tuple[Rule, ...]] = {
    (Step.BASIC_INFO, None): (_require_basic_info,),
    (Step.PRICING, None): _PRICING_STANDARD,
    (Step.PRICING, "rental"): (_require_legal_budget_type, _require_rental_rate),
    (Step.PRICING, "space_sharing"): (_require_legal_budget_type, _require_space_rate),
    (Step.PRICING, "fundraising"): (_require_legal_budget_type, _require_fundraising_goal),
    (Step.PRICING, "link"): (_require_legal_budget_type, _require_link_url),
    (Step.PRICING, "gated_content"): (_require_legal_budget_type, _require_content_tier),
    (Step.BOOKING, None): (_require_time_slots,),
    (Step.BOOKING, "rental"): (_require_availability_periods,),
    (Step.LOCATION, None): (_require_location,),
    (Step.SETTINGS, None): (),
    (Step.REVIEW, None): (),
}


def rules_for(step: Step, listing_type: str) -> tuple[Rule, ...]:
    return _RULES.get((step, listing_type), _RULES[(step, None)])


def _next_step(step: Step, flow: tuple[Step, ...]) -> Step | None:
    idx = flow.index(step)
    return flow[idx + 1] if idx + 1 < len(flow) else None


def validate_step(step: Step | int, draft: ListingDraft, flow: tuple[Step, ...] = FULL_FLOW) -> StepResult:
    """
    Gate leaving `step`. Returns the next step of `flow` on success; on the
    last step the draft is ready to submit and there is no next step.
    """
    step = Step(step)
    if step not in flow:
        return StepResult(ok=False, reason=f"Step {step.name.lower()} is not part of this wizard")

    for rule in rules_for(step, draft.listing_type):
        reason = rule(draft)
        if reason is not None:
            return StepResult(ok=False, reason=reason)

    nxt = _next_step(step, flow)
    if nxt is None:
        return StepResult(ok=True, ready_to_submit=True)
    return StepResult(ok=True, next_step=nxt)
