from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0003_review_incentive_settings"
down_revision = "0002_service_settings"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "review_incentive_settings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("provider_id", sa.String(), nullable=False),
        sa.Column("listing_id", sa.String(), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False),

        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("incentive_type", sa.String(length=20), nullable=False, server_default="discount"),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("discount_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("min_rating", sa.Numeric(2, 1), nullable=False, server_default="4.0"),
        sa.Column("require_text_review", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_uses_per_customer", sa.Integer(), nullable=False, server_default="1"),

        sa.Column("auto_generate_coupon", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("coupon_code_prefix", sa.String(length=20), nullable=False, server_default="REVIEW"),
        sa.Column("coupon_valid_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("incentive_message", sa.Text(), nullable=True),

        sa.Column("review_platforms", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[\"in_app\"]'::jsonb")),
        sa.Column("facebook_page_id", sa.String(length=255), nullable=True),
        sa.Column("facebook_page_url", sa.Text(), nullable=True),
        sa.Column("google_place_id", sa.String(length=255), nullable=True),
        sa.Column("google_business_url", sa.Text(), nullable=True),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.UniqueConstraint("provider_id", "listing_id", name="uq_review_incentive_provider_listing"),
    )

    op.create_index("ix_review_incentive_settings_provider_id", "review_incentive_settings", ["provider_id"])
    op.create_index("ix_review_incentive_settings_listing_id", "review_incentive_settings", ["listing_id"])


def downgrade():
    op.drop_index("ix_review_incentive_settings_listing_id", table_name="review_incentive_settings")
    op.drop_index("ix_review_incentive_settings_provider_id", table_name="review_incentive_settings")
    op.drop_table("review_incentive_settings")
