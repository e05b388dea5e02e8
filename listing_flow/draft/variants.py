from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from listing_flow.draft.pricing import _to_text


ListingType = Literal[
    "service",
    "goods",
    "rental",
    "experience",
    "subscription",
    "freelance",
    "auction",
    "space_sharing",
    "fundraising",
    "transportation",
    "link",
    "gated_content",
]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class VariantBase(BaseModel):
    """
    Listing-type-specific attributes.

    Field names are the column names of the listings table so that a variant
    dumps straight into the primary record. Money fields are kept as form text
    ("12.50"); counts are ints. Submission coerces both.
    """
    model_config = ConfigDict(extra="ignore")

    # Money-like text fields per variant; populated by each subclass
    money_fields: ClassVar[tuple[str, ...]] = ()
    # Fields holding an ISO timestamp as text
    timestamp_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _coerce_inputs(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out = dict(data)
        for name, field in cls.model_fields.items():
            # kind is the union discriminator and must reach pydantic untouched
            if name == "kind" or name not in out:
                continue
            if field.annotation is str:
                out[name] = _to_text(out[name])
                continue
            v = _blank_to_none(out[name])
            # Columns of a freshly switched-to variant come back as null
            if v is None and not field.is_required():
                del out[name]
            else:
                out[name] = v
        return out

    def column_values(self) -> dict[str, Any]:
        return self.model_dump(exclude={"kind"})


class ServiceVariant(VariantBase):
    kind: Literal["service"] = "service"


class GoodsVariant(VariantBase):
    kind: Literal["goods"] = "goods"
    money_fields: ClassVar[tuple[str, ...]] = (
        "shipping_cost",
        "auction_start_price",
        "auction_reserve_price",
        "auction_bid_increment",
        "auction_buy_now_price",
    )
    timestamp_fields: ClassVar[tuple[str, ...]] = ("auction_end_time",)

    stock_quantity: int | None = Field(default=None, ge=0)
    shipping_available: bool = False
    shipping_cost: str = ""

    # Used when the goods listing is priced as an auction
    auction_start_price: str = ""
    auction_reserve_price: str = ""
    auction_bid_increment: str = ""
    auction_buy_now_price: str = ""
    auction_end_time: str = ""


class RentalVariant(VariantBase):
    kind: Literal["rental"] = "rental"
    money_fields: ClassVar[tuple[str, ...]] = (
        "rental_rate_hourly",
        "rental_rate_daily",
        "rental_rate_weekly",
        "rental_rate_monthly",
        "security_deposit",
        "cleaning_fee",
        "delivery_cost",
    )

    rental_duration_type: Literal["hourly", "daily", "weekly", "monthly"] = "daily"
    rental_min_duration: int | None = Field(default=None, ge=0)
    rental_max_duration: int | None = Field(default=None, ge=0)
    rental_rate_hourly: str = ""
    rental_rate_daily: str = ""
    rental_rate_weekly: str = ""
    rental_rate_monthly: str = ""
    security_deposit: str = ""
    cleaning_fee: str = ""
    insurance_required: bool = False
    insurance_provider: str = ""
    pickup_available: bool = False
    delivery_available: bool = False
    delivery_cost: str = ""
    condition_notes: str = ""

    def rate_for_duration(self) -> str:
        return getattr(self, f"rental_rate_{self.rental_duration_type}")


class ExperienceVariant(VariantBase):
    kind: Literal["experience"] = "experience"

    experience_duration_hours: int | None = Field(default=None, ge=0)
    experience_max_participants: int | None = Field(default=None, ge=1)
    experience_min_age: int | None = Field(default=None, ge=0)
    experience_includes: list[str] = Field(default_factory=list)
    experience_meeting_point: str = ""
    experience_cancellation_policy: str = ""


class SubscriptionVariant(VariantBase):
    kind: Literal["subscription"] = "subscription"

    subscription_billing_cycle: Literal["weekly", "monthly", "quarterly", "yearly"] = "monthly"
    subscription_trial_days: int = Field(default=0, ge=0)
    subscription_auto_renew: bool = True
    subscription_features: list[str] = Field(default_factory=list)


class FreelanceVariant(VariantBase):
    kind: Literal["freelance"] = "freelance"

    freelance_category: Literal[
        "ugc", "design", "writing", "video", "photography", "social_media", "consulting", "other"
    ] | None = None
    freelance_portfolio_url: str = ""
    freelance_delivery_days: int | None = Field(default=None, ge=0)
    freelance_revisions_included: int = Field(default=0, ge=0)
    freelance_skills: list[str] = Field(default_factory=list)


class AuctionVariant(VariantBase):
    kind: Literal["auction"] = "auction"
    money_fields: ClassVar[tuple[str, ...]] = (
        "auction_start_price",
        "auction_reserve_price",
        "auction_bid_increment",
        "auction_buy_now_price",
    )
    timestamp_fields: ClassVar[tuple[str, ...]] = ("auction_end_time",)

    auction_start_price: str = ""
    auction_reserve_price: str = ""
    auction_bid_increment: str = ""
    auction_buy_now_price: str = ""
    auction_end_time: str = ""


class SpaceSharingVariant(VariantBase):
    kind: Literal["space_sharing"] = "space_sharing"
    money_fields: ClassVar[tuple[str, ...]] = ("space_hourly_rate", "space_daily_rate")

    space_type: Literal[
        "parking", "storage", "workspace", "event_venue", "studio", "kitchen", "couchsurfing", "other"
    ] | None = None
    space_capacity: int | None = Field(default=None, ge=0)
    space_amenities: list[str] = Field(default_factory=list)
    space_hourly_rate: str = ""
    space_daily_rate: str = ""


class FundraisingVariant(VariantBase):
    kind: Literal["fundraising"] = "fundraising"
    money_fields: ClassVar[tuple[str, ...]] = ("fundraising_goal",)
    timestamp_fields: ClassVar[tuple[str, ...]] = ("fundraising_end_date",)

    fundraising_goal: str = ""
    fundraising_end_date: str = ""
    fundraising_category: Literal[
        "charity", "personal", "business", "event", "medical", "education", "other"
    ] | None = None
    fundraising_beneficiary: str = ""


class TransportationVariant(VariantBase):
    kind: Literal["transportation"] = "transportation"

    # Delivery services
    delivery_type: Literal["food", "grocery", "package", "medicine", "other"] | None = None
    delivery_radius_km: int | None = Field(default=None, ge=0)
    delivery_fee_structure: Literal["fixed", "distance_based", "weight_based"] | None = None
    delivery_estimated_time: int | None = Field(default=None, ge=0, description="Minutes")

    # Taxi services
    taxi_vehicle_type: Literal["standard", "luxury", "van", "motorcycle", "bike"] | None = None
    taxi_max_passengers: int | None = Field(default=None, ge=1)
    taxi_license_number: str = ""


class LinkVariant(VariantBase):
    kind: Literal["link"] = "link"

    link_url: str = ""
    link_type: Literal["affiliate", "redirect", "short_link"] = "affiliate"


class ContentTier(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    price: str = ""
    billing_cycle: Literal["weekly", "monthly", "quarterly", "yearly"] = "monthly"
    description: str = ""
    features: list[str] = Field(default_factory=list)

    @field_validator("name", "price", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _to_text(v)


class GatedContentVariant(VariantBase):
    kind: Literal["gated_content"] = "gated_content"

    content_tiers: list[ContentTier] = Field(default_factory=list)
    content_preview: str = ""
    access_level: Literal["free", "premium", "vip"] | None = None


ListingVariant = Annotated[
    Union[
        ServiceVariant,
        GoodsVariant,
        RentalVariant,
        ExperienceVariant,
        SubscriptionVariant,
        FreelanceVariant,
        AuctionVariant,
        SpaceSharingVariant,
        FundraisingVariant,
        TransportationVariant,
        LinkVariant,
        GatedContentVariant,
    ],
    Field(discriminator="kind"),
]
