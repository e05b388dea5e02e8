from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


RefundPolicy = Literal["full", "partial", "none"]
IncentiveType = Literal["discount", "credit", "points"]
ReviewPlatform = Literal["in_app", "facebook", "google"]
AmountMode = Literal["percentage", "amount"]

DEFAULT_INCENTIVE_MESSAGE = "Thank you for your review! Here's a discount for your next booking."


class CancellationPolicy(BaseModel):
    """
    Cancellation terms persisted with the listing's service settings.

    fee_percentage and fee_amount are exclusive: fee_mode says which one is
    current and the other is kept at zero by the form setters.
    """
    cancellation_hours: int = Field(default=24, ge=0)
    cancellation_fee_enabled: bool = False
    fee_mode: AmountMode = "percentage"
    fee_percentage: float = Field(default=0.0, ge=0, le=100)
    fee_amount: float = Field(default=0.0, ge=0)
    refund_policy: RefundPolicy = "full"

    def current_fee(self) -> tuple[float | None, float | None]:
        """(percentage, amount) with only the current one set, or both None when fees are off."""
        if not self.cancellation_fee_enabled:
            return None, None
        if self.fee_mode == "percentage":
            return (self.fee_percentage or None), None
        return None, (self.fee_amount or None)


class ReviewIncentive(BaseModel):
    enabled: bool = False
    incentive_type: IncentiveType = "discount"
    discount_mode: AmountMode = "percentage"
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    discount_amount: float = Field(default=0.0, ge=0)
    min_rating: float = Field(default=4.0, ge=1.0, le=5.0)
    require_text_review: bool = False
    max_uses_per_customer: int = Field(default=1, ge=1)
    auto_generate_coupon: bool = True
    coupon_prefix: str = "REVIEW"
    coupon_valid_days: int = Field(default=30, ge=1)
    message: str = DEFAULT_INCENTIVE_MESSAGE
    platforms: list[ReviewPlatform] = Field(default_factory=lambda: ["in_app"])

    # Linkage for external review platforms; required when the platform is selected
    facebook_page_id: str = ""
    facebook_page_url: str = ""
    google_place_id: str = ""
    google_business_url: str = ""

    def current_discount(self) -> tuple[float | None, float | None]:
        if self.discount_mode == "percentage":
            return (self.discount_percentage or None), None
        return None, (self.discount_amount or None)

    def linked_platforms(self) -> list[str]:
        """
        Selected platforms that can actually be used: facebook/google need
        their URL. Falls back to in-app reviews when nothing usable is left.
        """
        out: list[str] = []
        for p in self.platforms:
            if p == "facebook" and not self.facebook_page_url.strip():
                continue
            if p == "google" and not self.google_business_url.strip():
                continue
            if p not in out:
                out.append(p)
        return out or ["in_app"]
