from typing import Literal

from pydantic import BaseModel, Field

from listing_flow.draft.listing import ListingDraft


class StepValidationIn(BaseModel):
    step: int = Field(ge=1, le=6)
    flow: Literal["full", "basic"] = "full"
    draft: ListingDraft


class StepValidationOut(BaseModel):
    ok: bool
    next_step: int | None = None
    reason: str | None = None
    ready_to_submit: bool = False


class ListingSubmitIn(BaseModel):
    draft: ListingDraft


class AlertOut(BaseModel):
    title: str
    message: str


class SubmissionOut(BaseModel):
    ok: bool
    listing_id: str
    booking_warning: str | None = None
    alerts: list[AlertOut] = Field(default_factory=list)


class ListingDraftOut(BaseModel):
    listing_id: str
    draft: ListingDraft


class QuotaOut(BaseModel):
    used: int
    limit: int | None
    remaining: int | None
    can_create: bool
