import pytest

from listing_flow.draft.listing import ListingLocation
from listing_flow.draft.pricing import PriceListItem
from listing_flow.draft.scheduling import AvailabilityPeriod, BookingSetup, TimeSlot
from listing_flow.draft.variants import AuctionVariant, ContentTier, GatedContentVariant, LinkVariant, RentalVariant
from listing_flow.services.step_validation import BASIC_FLOW, FULL_FLOW, Step, validate_step


def test_plumbing_scenario_passes_basic_pricing_and_location(make_draft):
    draft = make_draft()

    r1 = validate_step(Step.BASIC_INFO, draft)
    assert r1.ok and r1.next_step == Step.PRICING

    r2 = validate_step(Step.PRICING, draft)
    assert r2.ok and r2.next_step == Step.BOOKING

    r4 = validate_step(Step.LOCATION, draft)
    assert r4.ok and r4.next_step == Step.SETTINGS


def test_basic_info_requires_trimmed_fields(make_draft):
    res = validate_step(Step.BASIC_INFO, make_draft(title="   "))
    assert not res.ok
    assert res.reason
    assert res.next_step is None


@pytest.mark.parametrize(
    "lo,hi,ok",
    [
        ("10", "20", True),
        ("10", "10", False),
        ("30", "20", False),
        ("9.99", "10", True),
        ("", "20", False),
        ("10", "", False),
        ("ten", "20", False),
    ],
)
def test_range_requires_strictly_increasing_numbers(make_draft, lo, hi, ok):
    draft = make_draft(budget_type="range", budget_min=lo, budget_max=hi)
    assert validate_step(Step.PRICING, draft).ok is ok


@pytest.mark.parametrize(
    "items,ok",
    [
        ([], False),
        ([PriceListItem(id="p1", service_name="Cut", price="20")], True),
        ([PriceListItem(id="p1", service_name="Cut", price="20"), PriceListItem(id="p2", service_name=" ", price="5")], False),
        ([PriceListItem(id="p1", service_name="Cut", price="")], False),
    ],
)
def test_price_list_needs_complete_entries(make_draft, items, ok):
    draft = make_draft(budget_type="price_list", price_list=items)
    assert validate_step(Step.PRICING, draft).ok is ok


def test_fixed_price_needs_budget_min(make_draft):
    assert not validate_step(Step.PRICING, make_draft(budget_min="")).ok


def test_budget_type_must_be_legal_for_listing_type(make_draft):
    draft = make_draft(variant=LinkVariant(link_url="https://example.com"), budget_type="range")
    res = validate_step(Step.PRICING, draft)
    assert not res.ok
    assert res.reason == "Pricing type must be one of: fixed"


def test_variant_parity_rules(make_draft):
    rental = make_draft(variant=RentalVariant(rental_duration_type="weekly", rental_rate_daily="40"))
    res = validate_step(Step.PRICING, rental)
    assert not res.ok and "weekly" in res.reason

    rental_ok = make_draft(variant=RentalVariant(rental_duration_type="weekly", rental_rate_weekly="250"))
    assert validate_step(Step.PRICING, rental_ok).ok

    link = make_draft(variant=LinkVariant())
    assert not validate_step(Step.PRICING, link).ok

    gated = make_draft(variant=GatedContentVariant(content_tiers=[ContentTier(name="Gold", price="")]))
    assert not validate_step(Step.PRICING, gated).ok
    gated_ok = make_draft(variant=GatedContentVariant(content_tiers=[ContentTier(name="Gold", price="9")]))
    assert validate_step(Step.PRICING, gated_ok).ok


def test_auction_needs_start_price(make_draft):
    draft = make_draft(variant=AuctionVariant(), budget_type="auction")
    assert not validate_step(Step.PRICING, draft).ok
    draft = make_draft(variant=AuctionVariant(auction_start_price="100"), budget_type="auction")
    assert validate_step(Step.PRICING, draft).ok


def test_booking_rules(make_draft):
    # booking off: nothing required
    assert validate_step(Step.BOOKING, make_draft()).ok

    no_slots = make_draft(booking=BookingSetup(booking_enabled=True))
    assert not validate_step(Step.BOOKING, no_slots).ok

    bad_slot = make_draft(
        booking=BookingSetup(
            booking_enabled=True,
            time_slots=[TimeSlot(id="s1", day="monday", start_time="12:00", end_time="09:00")],
        )
    )
    assert not validate_step(Step.BOOKING, bad_slot).ok

    good = make_draft(
        booking=BookingSetup(
            booking_enabled=True,
            time_slots=[TimeSlot(id="s1", day="monday", start_time="09:00", end_time="12:00")],
        )
    )
    assert validate_step(Step.BOOKING, good).ok


def test_rental_booking_needs_availability_period(make_draft):
    rental = RentalVariant(rental_rate_daily="40")
    draft = make_draft(variant=rental, booking=BookingSetup(booking_enabled=True))
    assert not validate_step(Step.BOOKING, draft).ok

    period = AvailabilityPeriod(id="a1", start_date="2026-06-01", end_date="2026-06-30")
    draft = make_draft(variant=rental, booking=BookingSetup(booking_enabled=True, availability_periods=[period]))
    assert validate_step(Step.BOOKING, draft).ok


def test_location_with_exact_address_needs_full_address(make_draft):
    loc = ListingLocation(location_address="10 Downing St", show_exact_address=True, city="London")
    assert not validate_step(Step.LOCATION, make_draft(location=loc)).ok

    loc = loc.model_copy(update={"street_address": "10 Downing St", "postal_code": "SW1A 2AA", "country": "GB"})
    assert validate_step(Step.LOCATION, make_draft(location=loc)).ok

    assert not validate_step(Step.LOCATION, make_draft(location=ListingLocation())).ok


def test_settings_always_passes_and_review_is_final(make_draft):
    draft = make_draft(title="")
    assert validate_step(Step.SETTINGS, draft).ok

    res = validate_step(Step.REVIEW, draft)
    assert res.ok and res.ready_to_submit and res.next_step is None


def test_basic_flow_skips_booking_and_settings(make_draft):
    draft = make_draft()
    assert validate_step(Step.PRICING, draft, BASIC_FLOW).next_step == Step.LOCATION
    assert validate_step(Step.LOCATION, draft, BASIC_FLOW).next_step == Step.REVIEW
    assert not validate_step(Step.BOOKING, draft, BASIC_FLOW).ok
    assert validate_step(Step.LOCATION, draft, FULL_FLOW).next_step == Step.SETTINGS
