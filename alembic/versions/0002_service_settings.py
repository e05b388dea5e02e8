from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_service_settings"
down_revision = "0001_listings"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "service_settings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("listing_id", sa.String(), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False),

        sa.Column("booking_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("service_type", sa.String(length=50), nullable=False, server_default="appointment"),
        sa.Column("default_duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("buffer_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("service_options", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),

        sa.Column("advance_booking_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("same_day_booking", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("auto_confirm", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("cancellation_hours", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("cancellation_fee_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cancellation_fee_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("cancellation_fee_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("refund_policy", sa.String(length=20), nullable=False, server_default="full"),

        sa.Column("working_hours", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("break_times", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("calendar_connected", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.UniqueConstraint("listing_id", name="uq_service_settings_listing"),
    )


def downgrade():
    op.drop_table("service_settings")
