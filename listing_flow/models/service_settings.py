from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from listing_flow.core.ids import gen_id

from listing_flow.models.base import AuditMixin, Base, JSONType


class ServiceSettings(AuditMixin, Base):
    """
    Booking configuration of one listing. Rewritten from the draft on every
    submission with booking enabled.
    """
    __tablename__ = "service_settings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id("svc"))
    listing_id: Mapped[str] = mapped_column(
        String, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    booking_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # "appointment" | "consultation" | "service" | "class"
    service_type: Mapped[str] = mapped_column(String(50), nullable=False, default="appointment")
    default_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    buffer_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=15)

    # [{"name", "duration", "price", "currency"}]
    service_options: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    advance_booking_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    same_day_booking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_confirm: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Cancellation policy
    cancellation_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=24)
    cancellation_fee_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cancellation_fee_percentage: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)
    cancellation_fee_amount: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    # "full" | "partial" | "none"
    refund_policy: Mapped[str] = mapped_column(String(20), nullable=False, default="full")

    # {"monday": {"enabled", "start", "end"}, ...}
    working_hours: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    break_times: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    calendar_connected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
