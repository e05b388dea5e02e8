from datetime import datetime

from sqlalchemy import Boolean, Float, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from listing_flow.core.ids import gen_id

from listing_flow.models.base import AuditMixin, Base, JSONType


def _money() -> Mapped[float | None]:
    return mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)


class Listing(AuditMixin, Base):
    __tablename__ = "listings"
    __table_args__ = (
        Index("ix_listings_user_status", "user_id", "status"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("lst"))
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    # Common
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    listing_type: Mapped[str] = mapped_column(String(50), nullable=False, default="service")
    tags: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    photos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    urgency: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # YYYY-MM-DD, already validated as a calendar date
    preferred_date: Mapped[str | None] = mapped_column(String(10), nullable=True)

    # "active" | "matched" | "in_progress" | "completed" | "cancelled" | "expired"
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active")
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Pricing
    budget_type: Mapped[str] = mapped_column(String(30), nullable=False, default="range")
    budget_min: Mapped[float | None] = _money()
    budget_max: Mapped[float | None] = _money()
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="GBP")
    price_list: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Location
    location_address: Mapped[str] = mapped_column(Text, nullable=False)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    show_exact_address: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    street_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    location_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Booking
    booking_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    service_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    time_slots: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    rental_availability_periods: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Goods
    stock_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    shipping_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    shipping_cost: Mapped[float | None] = _money()

    # Auction (auction listings and goods sold by auction)
    auction_start_price: Mapped[float | None] = _money()
    auction_reserve_price: Mapped[float | None] = _money()
    auction_bid_increment: Mapped[float | None] = _money()
    auction_buy_now_price: Mapped[float | None] = _money()
    auction_end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Rental
    rental_duration_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    rental_min_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rental_max_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rental_rate_hourly: Mapped[float | None] = _money()
    rental_rate_daily: Mapped[float | None] = _money()
    rental_rate_weekly: Mapped[float | None] = _money()
    rental_rate_monthly: Mapped[float | None] = _money()
    security_deposit: Mapped[float | None] = _money()
    cleaning_fee: Mapped[float | None] = _money()
    insurance_required: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    insurance_provider: Mapped[str | None] = mapped_column(String(200), nullable=True)
    pickup_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    delivery_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    delivery_cost: Mapped[float | None] = _money()
    condition_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Experience
    experience_duration_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    experience_max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    experience_min_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    experience_includes: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    experience_meeting_point: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_cancellation_policy: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Subscription
    subscription_billing_cycle: Mapped[str | None] = mapped_column(String(20), nullable=True)
    subscription_trial_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    subscription_auto_renew: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    subscription_features: Mapped[list | None] = mapped_column(JSONType, nullable=True)

    # Freelance
    freelance_category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    freelance_portfolio_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    freelance_delivery_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    freelance_revisions_included: Mapped[int | None] = mapped_column(Integer, nullable=True)
    freelance_skills: Mapped[list | None] = mapped_column(JSONType, nullable=True)

    # Space sharing
    space_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    space_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    space_amenities: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    space_hourly_rate: Mapped[float | None] = _money()
    space_daily_rate: Mapped[float | None] = _money()

    # Fundraising
    fundraising_goal: Mapped[float | None] = _money()
    fundraising_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    fundraising_category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fundraising_beneficiary: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Transportation: delivery
    delivery_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    delivery_radius_km: Mapped[int | None] = mapped_column(Integer, nullable=True)
    delivery_fee_structure: Mapped[str | None] = mapped_column(String(50), nullable=True)
    delivery_estimated_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Transportation: taxi
    taxi_vehicle_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    taxi_max_passengers: Mapped[int | None] = mapped_column(Integer, nullable=True)
    taxi_license_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Link
    link_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Gated content
    content_tiers: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    content_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
