import json

from listing_flow.draft.listing import ListingDraft
from listing_flow.draft.variants import RentalVariant, ServiceVariant
from listing_flow.services.form_store import ListingFormStore


def _persisted_listing(**overrides):
    record = {
        "id": "lst_1",
        "user_id": "usr_alice",
        "title": "Dog walking",
        "description": "Daily walks",
        "category": "Pets",
        "listing_type": "service",
        "tags": json.dumps(["dogs", "walks"]),
        "photos": '["walk.jpg", "https://cdn.example.com/b.jpg"]',
        "budget_type": "price_list",
        "budget_min": None,
        "budget_max": None,
        "currency": "gbp",
        "price_list": json.dumps([{"serviceName": "30 min", "price": 12}, {"service_name": "60 min", "price": 20.5}]),
        "urgency": "asap",
        "preferred_date": "2025-02-30",
        "location_address": "Hyde Park",
        "booking_enabled": True,
        "service_name": "Walk",
        "time_slots": [{"day": "monday", "startTime": "09:00", "endTime": "10:00"}],
        "rental_availability_periods": "not json at all",
        "service_settings": {
            "cancellation_hours": 48,
            "cancellation_fee_enabled": True,
            "cancellation_fee_percentage": None,
            "cancellation_fee_amount": 5.0,
            "refund_policy": "partial",
        },
        "review_incentive_settings": None,
    }
    record.update(overrides)
    return record


def test_setters_ignore_unknown_and_invalid_values():
    store = ListingFormStore()

    assert store.set_field("title", "Fix sink")
    assert not store.set_field("no_such_field", "x")
    assert not store.set_field("urgency", "yesterday")
    assert not store.update_location(location_lat=123.0)
    assert not store.update_location(altitude=10)

    d = store.draft
    assert d.title == "Fix sink"
    assert d.urgency == "flexible"
    assert d.location.location_lat is None


def test_tags_are_deduplicated_in_order():
    store = ListingFormStore()
    store.set_tags(["plumbing", " leaks ", "plumbing", 7])
    store.add_tag("leaks")
    store.add_tag("emergency")
    assert store.draft.tags == ["plumbing", "leaks", "emergency"]

    store.remove_tag("leaks")
    assert store.draft.tags == ["plumbing", "emergency"]


def test_switching_listing_type_resets_incompatible_budget_type_and_restores_variant():
    store = ListingFormStore()
    assert store.draft.budget_type == "range"

    store.set_listing_type("rental")
    assert isinstance(store.draft.variant, RentalVariant)
    assert store.draft.budget_type == "fixed"
    store.update_variant(rental_rate_daily="40", security_deposit=100)

    store.set_listing_type("service")
    assert isinstance(store.draft.variant, ServiceVariant)
    assert store.draft.listing_type == "service"

    store.set_listing_type("rental")
    assert store.draft.variant.rental_rate_daily == "40"
    assert store.draft.variant.security_deposit == "100"


def test_unknown_listing_type_and_illegal_budget_type_are_ignored():
    store = ListingFormStore()
    assert not store.set_listing_type("spaceship")
    store.set_listing_type("auction")
    assert store.draft.budget_type == "auction"
    assert not store.set_budget_type("range")
    assert store.draft.budget_type == "auction"


def test_update_variant_rejects_fields_of_other_listing_types():
    store = ListingFormStore()
    store.set_listing_type("link")
    assert not store.update_variant(rental_rate_daily="40")
    assert store.update_variant(link_url="https://example.com", link_type="redirect")
    assert store.draft.variant.link_type == "redirect"


def test_percentage_and_amount_are_exclusive():
    store = ListingFormStore()
    store.update_policy(cancellation_fee_enabled=True)
    store.set_cancellation_fee_percentage(20)
    store.set_cancellation_fee_amount(7.5)

    policy = store.draft.policy
    assert policy.fee_mode == "amount"
    assert policy.fee_percentage == 0.0
    assert policy.current_fee() == (None, 7.5)

    store.set_review_discount_amount(5)
    store.set_review_discount_percentage(10)
    incentive = store.draft.review_incentive
    assert incentive.discount_amount == 0.0
    assert incentive.current_discount() == (10.0, None)


def test_out_of_range_percentage_is_ignored():
    store = ListingFormStore()
    store.set_cancellation_fee_percentage(20)
    assert not store.set_cancellation_fee_percentage(150)
    assert store.draft.policy.fee_percentage == 20


def test_bad_time_slots_are_skipped():
    store = ListingFormStore()
    store.set_time_slots(
        [
            {"day": "monday", "startTime": "09:00", "endTime": "12:00"},
            {"day": "funday", "startTime": "09:00", "endTime": "12:00"},
            "09:00-12:00",
        ]
    )
    slots = store.draft.booking.time_slots
    assert len(slots) == 1
    assert slots[0].day == "monday"
    assert slots[0].id.startswith("slot_")


def test_reset_clears_unless_editing():
    store = ListingFormStore()
    store.set_field("title", "Fix sink")
    store.reset()
    assert store.draft.title == ""

    editing = ListingFormStore(edit_mode=True)
    editing.set_field("title", "Fix sink")
    editing.reset()
    assert editing.draft.title == "Fix sink"


def test_load_from_existing_tolerates_malformed_columns():
    store = ListingFormStore(base_url="https://www.izimate.com")
    store.load_from_existing(_persisted_listing())
    d = store.draft

    assert d.id == "lst_1"
    assert d.tags == ["dogs", "walks"]
    assert d.photos == ["https://www.izimate.com/picture/walk.jpg", "https://cdn.example.com/b.jpg"]
    assert [(p.id, p.service_name, p.price) for p in d.price_list] == [
        ("price-0", "30 min", "12"),
        ("price-1", "60 min", "20.5"),
    ]
    assert d.currency == "GBP"
    assert d.preferred_date == ""
    assert d.booking.time_slots[0].id == "slot-0"
    assert d.booking.availability_periods == []
    assert d.policy.cancellation_hours == 48
    assert d.policy.current_fee() == (None, 5.0)
    assert d.policy.refund_policy == "partial"
    assert d.review_incentive.enabled is False
    assert store.edit_mode is True


def test_load_from_existing_is_idempotent():
    first = ListingFormStore()
    first.load_from_existing(_persisted_listing())
    second = ListingFormStore()
    second.load_from_existing(_persisted_listing())
    second.load_from_existing(_persisted_listing())
    assert first.draft == second.draft


def test_load_from_existing_survives_unknown_type_and_bad_budget_type():
    store = ListingFormStore()
    store.load_from_existing(_persisted_listing(listing_type="hovercraft", budget_type="auction"))
    assert store.draft.listing_type == "service"
    assert store.draft.budget_type == "range"


def test_booking_setters_keep_the_rest_of_the_group():
    store = ListingFormStore()
    store.set_booking_enabled(True)
    store.set_time_slots([{"id": "s1", "day": "friday", "startTime": "10:00", "endTime": "11:00"}])
    store.set_service_name("Call-out")

    booking = store.draft.booking
    assert booking.booking_enabled is True
    assert booking.service_name == "Call-out"
    assert [s.id for s in booking.time_slots] == ["s1"]


def test_variant_is_built_from_plain_data():
    draft = ListingDraft(variant={"kind": "rental", "rental_rate_daily": 40, "security_deposit": None, "rental_min_duration": ""})
    assert isinstance(draft.variant, RentalVariant)
    assert draft.variant.rental_rate_daily == "40"
    assert draft.variant.security_deposit == ""
    assert draft.variant.rental_min_duration is None
    assert draft.listing_type == "rental"

    assert isinstance(ListingDraft(variant={"kind": "service"}).variant, ServiceVariant)
