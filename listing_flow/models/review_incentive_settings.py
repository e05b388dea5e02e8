from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from listing_flow.core.ids import gen_id

from listing_flow.models.base import AuditMixin, Base, JSONType


class ReviewIncentiveSettings(AuditMixin, Base):
    __tablename__ = "review_incentive_settings"
    __table_args__ = (
        # one incentive per provider per listing
        UniqueConstraint("provider_id", "listing_id", name="uq_review_incentive_provider_listing"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("rin"))
    provider_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    listing_id: Mapped[str] = mapped_column(
        String, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True
    )

    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # "discount" | "credit" | "points"
    incentive_type: Mapped[str] = mapped_column(String(20), nullable=False, default="discount")
    discount_percentage: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)
    discount_amount: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    min_rating: Mapped[float] = mapped_column(Numeric(2, 1, asdecimal=False), nullable=False, default=4.0)
    require_text_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_uses_per_customer: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    auto_generate_coupon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    coupon_code_prefix: Mapped[str] = mapped_column(String(20), nullable=False, default="REVIEW")
    coupon_valid_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    incentive_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ["in_app", "facebook", "google"]
    review_platforms: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    facebook_page_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    facebook_page_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_place_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    google_business_url: Mapped[str | None] = mapped_column(Text, nullable=True)
