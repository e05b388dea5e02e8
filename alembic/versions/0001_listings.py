from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_listings"
down_revision = None
branch_labels = None
depends_on = None


def _jsonb(name: str, nullable: bool = True, default: str | None = None) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        nullable=nullable,
        server_default=sa.text(f"'{default}'::jsonb") if default is not None else None,
    )


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(10, 2), nullable=True)


def upgrade():
    op.create_table(
        "listings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),

        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("listing_type", sa.String(length=50), nullable=False, server_default="service"),
        _jsonb("tags"),
        _jsonb("photos", nullable=False, default="[]"),
        sa.Column("urgency", sa.String(length=20), nullable=True),
        sa.Column("preferred_date", sa.String(length=10), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="active"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),

        sa.Column("budget_type", sa.String(length=30), nullable=False, server_default="range"),
        _money("budget_min"),
        _money("budget_max"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="GBP"),
        _jsonb("price_list", nullable=False, default="[]"),

        sa.Column("location_address", sa.Text(), nullable=False),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column("show_exact_address", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("street_address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("state", sa.String(length=120), nullable=True),
        sa.Column("postal_code", sa.String(length=30), nullable=True),
        sa.Column("country", sa.String(length=120), nullable=True),
        sa.Column("location_notes", sa.Text(), nullable=True),

        sa.Column("booking_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("service_name", sa.String(length=200), nullable=True),
        _jsonb("time_slots", nullable=False, default="[]"),
        _jsonb("rental_availability_periods", nullable=False, default="[]"),

        # goods
        sa.Column("stock_quantity", sa.Integer(), nullable=True),
        sa.Column("shipping_available", sa.Boolean(), nullable=True),
        _money("shipping_cost"),

        # auction
        _money("auction_start_price"),
        _money("auction_reserve_price"),
        _money("auction_bid_increment"),
        _money("auction_buy_now_price"),
        sa.Column("auction_end_time", sa.DateTime(timezone=True), nullable=True),

        # rental
        sa.Column("rental_duration_type", sa.String(length=20), nullable=True),
        sa.Column("rental_min_duration", sa.Integer(), nullable=True),
        sa.Column("rental_max_duration", sa.Integer(), nullable=True),
        _money("rental_rate_hourly"),
        _money("rental_rate_daily"),
        _money("rental_rate_weekly"),
        _money("rental_rate_monthly"),
        _money("security_deposit"),
        _money("cleaning_fee"),
        sa.Column("insurance_required", sa.Boolean(), nullable=True),
        sa.Column("insurance_provider", sa.String(length=200), nullable=True),
        sa.Column("pickup_available", sa.Boolean(), nullable=True),
        sa.Column("delivery_available", sa.Boolean(), nullable=True),
        _money("delivery_cost"),
        sa.Column("condition_notes", sa.Text(), nullable=True),

        # experience
        sa.Column("experience_duration_hours", sa.Integer(), nullable=True),
        sa.Column("experience_max_participants", sa.Integer(), nullable=True),
        sa.Column("experience_min_age", sa.Integer(), nullable=True),
        _jsonb("experience_includes"),
        sa.Column("experience_meeting_point", sa.Text(), nullable=True),
        sa.Column("experience_cancellation_policy", sa.Text(), nullable=True),

        # subscription
        sa.Column("subscription_billing_cycle", sa.String(length=20), nullable=True),
        sa.Column("subscription_trial_days", sa.Integer(), nullable=True),
        sa.Column("subscription_auto_renew", sa.Boolean(), nullable=True),
        _jsonb("subscription_features"),

        # freelance
        sa.Column("freelance_category", sa.String(length=50), nullable=True),
        sa.Column("freelance_portfolio_url", sa.Text(), nullable=True),
        sa.Column("freelance_delivery_days", sa.Integer(), nullable=True),
        sa.Column("freelance_revisions_included", sa.Integer(), nullable=True),
        _jsonb("freelance_skills"),

        # space sharing
        sa.Column("space_type", sa.String(length=50), nullable=True),
        sa.Column("space_capacity", sa.Integer(), nullable=True),
        _jsonb("space_amenities"),
        _money("space_hourly_rate"),
        _money("space_daily_rate"),

        # fundraising
        _money("fundraising_goal"),
        sa.Column("fundraising_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fundraising_category", sa.String(length=50), nullable=True),
        sa.Column("fundraising_beneficiary", sa.Text(), nullable=True),

        # transportation
        sa.Column("delivery_type", sa.String(length=50), nullable=True),
        sa.Column("delivery_radius_km", sa.Integer(), nullable=True),
        sa.Column("delivery_fee_structure", sa.String(length=50), nullable=True),
        sa.Column("delivery_estimated_time", sa.Integer(), nullable=True),
        sa.Column("taxi_vehicle_type", sa.String(length=50), nullable=True),
        sa.Column("taxi_max_passengers", sa.Integer(), nullable=True),
        sa.Column("taxi_license_number", sa.String(length=100), nullable=True),

        # link
        sa.Column("link_url", sa.Text(), nullable=True),
        sa.Column("link_type", sa.String(length=20), nullable=True),

        # gated content
        _jsonb("content_tiers"),
        sa.Column("content_preview", sa.Text(), nullable=True),
        sa.Column("access_level", sa.String(length=20), nullable=True),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_index("ix_listings_user_id", "listings", ["user_id"])
    op.create_index("ix_listings_user_status", "listings", ["user_id", "status"])


def downgrade():
    op.drop_index("ix_listings_user_status", table_name="listings")
    op.drop_index("ix_listings_user_id", table_name="listings")
    op.drop_table("listings")
