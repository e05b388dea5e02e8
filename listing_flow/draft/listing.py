from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from listing_flow.draft.policy import CancellationPolicy, ReviewIncentive
from listing_flow.draft.pricing import BudgetType, PriceListItem, _to_text
from listing_flow.draft.scheduling import BookingSetup
from listing_flow.draft.variants import ListingVariant, ServiceVariant


Urgency = Literal["asap", "this_week", "flexible"]
ListingStatus = Literal["draft", "active", "matched", "in_progress", "completed", "cancelled", "expired"]


class ListingLocation(BaseModel):
    location_address: str = ""
    location_lat: float | None = None
    location_lng: float | None = None
    show_exact_address: bool = False
    street_address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    location_notes: str = ""

    @field_validator(
        "location_address", "street_address", "city", "state", "postal_code", "country", "location_notes",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("location_lat")
    @classmethod
    def validate_lat(cls, v: float | None) -> float | None:
        if v is None:
            return None
        if v < -90.0 or v > 90.0:
            raise ValueError("location_lat must be between -90 and 90")
        return v

    @field_validator("location_lng")
    @classmethod
    def validate_lng(cls, v: float | None) -> float | None:
        if v is None:
            return None
        if v < -180.0 or v > 180.0:
            raise ValueError("location_lng must be between -180 and 180")
        return v


class ListingDraft(BaseModel):
    """
    The whole wizard form as one value.

    Common fields live at the top level; everything specific to a listing type
    lives in `variant`, a union tagged by `kind`. The listing type is the
    variant's kind, so a draft can never carry fields of two listing types.
    """
    model_config = ConfigDict(validate_assignment=True)

    # Identity
    id: str | None = None
    user_id: str | None = None

    # Common
    title: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    location: ListingLocation = Field(default_factory=ListingLocation)
    urgency: Urgency | None = "flexible"
    preferred_date: str = ""
    status: ListingStatus = "active"

    # Pricing envelope
    budget_type: BudgetType = "range"
    budget_min: str = ""
    budget_max: str = ""
    currency: str = "GBP"
    price_list: list[PriceListItem] = Field(default_factory=list)

    variant: ListingVariant = Field(default_factory=ServiceVariant)

    booking: BookingSetup = Field(default_factory=BookingSetup)
    policy: CancellationPolicy = Field(default_factory=CancellationPolicy)
    review_incentive: ReviewIncentive = Field(default_factory=ReviewIncentive)

    @property
    def listing_type(self) -> str:
        return self.variant.kind

    @field_validator("title", "description", "category", "preferred_date", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("budget_min", "budget_max", mode="before")
    @classmethod
    def coerce_amount_text(cls, v: Any) -> str:
        return _to_text(v)

    @field_validator("tags", mode="after")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        out: list[str] = []
        for tag in v:
            t = tag.strip()
            if t and t not in out:
                out.append(t)
        return out

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v
