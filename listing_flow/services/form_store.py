from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Type

from pydantic import BaseModel, ValidationError

from listing_flow.core.config import settings
from listing_flow.core.ids import gen_id
from listing_flow.draft.listing import ListingDraft, ListingLocation
from listing_flow.draft.policy import CancellationPolicy, ReviewIncentive
from listing_flow.draft.pricing import PriceListItem
from listing_flow.draft.registry import default_budget_type, is_budget_type_legal, resolve_variant
from listing_flow.draft.scheduling import AvailabilityPeriod, TimeSlot
from listing_flow.draft.variants import VariantBase
from listing_flow.services.listing_records import draft_from_record

log = logging.getLogger(__name__)

# Top-level fields settable one at a time; groups have their own setters
_COMMON_FIELDS = {
    "title",
    "description",
    "category",
    "urgency",
    "preferred_date",
    "status",
    "budget_min",
    "budget_max",
    "currency",
}


def _coerce_items(items: Iterable[Any], model: Type[BaseModel], id_prefix: str) -> list[Any]:
    out: list[Any] = []
    for item in items:
        if isinstance(item, model):
            out.append(item)
            continue
        if not isinstance(item, Mapping):
            log.warning("ignoring non-object %s item: %r", id_prefix, item)
            continue
        data = dict(item)
        data.setdefault("id", gen_id(id_prefix))
        try:
            out.append(model.model_validate(data))
        except ValidationError as e:
            log.warning("ignoring invalid %s item (%d errors)", id_prefix, e.error_count())
    return out


class ListingFormStore:
    """
    Holds the wizard's ListingDraft and the setters the step screens call.

    Setters never raise. A change that would make the draft invalid (unknown
    field, wrong type, out-of-range number) is logged and dropped, leaving the
    draft as it was. Each setter returns whether the change was applied.
    """

    def __init__(self, *, edit_mode: bool = False, base_url: str | None = None):
        self.edit_mode = edit_mode
        self._base_url = base_url or settings.storage_public_base_url
        self._draft = self._blank()
        # Variants the user switched away from, restored when they switch back
        self._stashed_variants: dict[str, VariantBase] = {}

    @staticmethod
    def _blank() -> ListingDraft:
        return ListingDraft(currency=settings.default_currency)

    @property
    def draft(self) -> ListingDraft:
        return self._draft

    def _apply(self, **changes: Any) -> bool:
        data = self._draft.model_dump()
        data.update(changes)
        try:
            self._draft = ListingDraft.model_validate(data)
        except ValidationError as e:
            log.warning("ignoring invalid update to %s (%d errors)", ", ".join(sorted(changes)), e.error_count())
            return False
        return True

    def _update_group(self, name: str, model: Type[BaseModel], fields: Mapping[str, Any]) -> bool:
        current = getattr(self._draft, name)
        known = {k: v for k, v in fields.items() if k in model.model_fields}
        unknown = sorted(set(fields) - set(known))
        if unknown:
            log.warning("ignoring unknown %s fields: %s", name, ", ".join(unknown))
        if not known:
            return False
        return self._apply(**{name: {**current.model_dump(), **known}})

    # --- common fields ---

    def set_field(self, name: str, value: Any) -> bool:
        if name not in _COMMON_FIELDS:
            log.warning("ignoring unknown form field %r", name)
            return False
        return self._apply(**{name: value})

    def set_tags(self, tags: Iterable[Any]) -> bool:
        return self._apply(tags=[t for t in tags if isinstance(t, str)])

    def add_tag(self, tag: str) -> bool:
        return self._apply(tags=[*self._draft.tags, tag])

    def remove_tag(self, tag: str) -> bool:
        return self._apply(tags=[t for t in self._draft.tags if t != tag])

    def set_photos(self, photos: Iterable[Any]) -> bool:
        return self._apply(photos=[p for p in photos if isinstance(p, str) and p.strip()])

    def update_location(self, **fields: Any) -> bool:
        return self._update_group("location", ListingLocation, fields)

    # --- listing type & pricing ---

    def set_listing_type(self, listing_type: str) -> bool:
        try:
            model = resolve_variant(listing_type)
        except KeyError:
            log.warning("ignoring unknown listing type %r", listing_type)
            return False
        current = self._draft.variant
        if current.kind == listing_type:
            return True

        self._stashed_variants[current.kind] = current
        variant = self._stashed_variants.pop(listing_type, None) or model()

        budget_type = self._draft.budget_type
        if not is_budget_type_legal(listing_type, budget_type):
            budget_type = default_budget_type(listing_type)
        return self._apply(variant=variant, budget_type=budget_type)

    def set_budget_type(self, budget_type: str) -> bool:
        if not is_budget_type_legal(self._draft.listing_type, budget_type):
            log.warning("budget type %r is not offered for %s listings", budget_type, self._draft.listing_type)
            return False
        return self._apply(budget_type=budget_type)

    def set_price_list(self, items: Iterable[Any]) -> bool:
        return self._apply(price_list=_coerce_items(items, PriceListItem, "price"))

    def update_variant(self, **fields: Any) -> bool:
        variant = self._draft.variant
        known = {k: v for k, v in fields.items() if k in type(variant).model_fields and k != "kind"}
        unknown = sorted(set(fields) - set(known))
        if unknown:
            log.warning("ignoring fields not on %s listings: %s", variant.kind, ", ".join(unknown))
        if not known:
            return False
        return self._apply(variant={**variant.model_dump(), **known})

    # --- booking ---

    def set_booking_enabled(self, enabled: bool) -> bool:
        return self._apply(booking={**self._draft.booking.model_dump(), "booking_enabled": enabled})

    def set_service_name(self, name: str) -> bool:
        return self._apply(booking={**self._draft.booking.model_dump(), "service_name": name})

    def set_time_slots(self, slots: Iterable[Any]) -> bool:
        coerced = _coerce_items(slots, TimeSlot, "slot")
        return self._apply(booking={**self._draft.booking.model_dump(), "time_slots": coerced})

    def set_availability_periods(self, periods: Iterable[Any]) -> bool:
        coerced = _coerce_items(periods, AvailabilityPeriod, "period")
        return self._apply(booking={**self._draft.booking.model_dump(), "availability_periods": coerced})

    # --- policy & review incentive ---

    def update_policy(self, **fields: Any) -> bool:
        return self._update_group("policy", CancellationPolicy, fields)

    def set_cancellation_fee_percentage(self, value: float) -> bool:
        return self._update_group(
            "policy", CancellationPolicy, {"fee_mode": "percentage", "fee_percentage": value, "fee_amount": 0.0}
        )

    def set_cancellation_fee_amount(self, value: float) -> bool:
        return self._update_group(
            "policy", CancellationPolicy, {"fee_mode": "amount", "fee_amount": value, "fee_percentage": 0.0}
        )

    def update_review_incentive(self, **fields: Any) -> bool:
        return self._update_group("review_incentive", ReviewIncentive, fields)

    def set_review_discount_percentage(self, value: float) -> bool:
        return self._update_group(
            "review_incentive",
            ReviewIncentive,
            {"discount_mode": "percentage", "discount_percentage": value, "discount_amount": 0.0},
        )

    def set_review_discount_amount(self, value: float) -> bool:
        return self._update_group(
            "review_incentive",
            ReviewIncentive,
            {"discount_mode": "amount", "discount_amount": value, "discount_percentage": 0.0},
        )

    # --- bulk ---

    def reset(self) -> None:
        if self.edit_mode:
            log.debug("reset skipped in edit mode")
            return
        self._draft = self._blank()
        self._stashed_variants.clear()

    def load_from_existing(self, record: Mapping[str, Any]) -> None:
        self._draft = draft_from_record(record, base_url=self._base_url)
        self._stashed_variants.clear()
        self.edit_mode = True
