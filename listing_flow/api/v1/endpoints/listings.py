from fastapi import APIRouter, Depends, HTTPException

from listing_flow.core.config import settings
from listing_flow.schemas.listing import (
    AlertOut,
    ListingDraftOut,
    ListingSubmitIn,
    QuotaOut,
    StepValidationIn,
    StepValidationOut,
    SubmissionOut,
)
from listing_flow.services.alerts import CollectingAlertSink
from listing_flow.services.auth import CurrentUser, StaticAuthProvider, get_request_user
from listing_flow.services.errors import (
    ListingNotFound,
    NotAuthenticated,
    QuotaExceeded,
    StoreUnavailable,
    SubmissionError,
    ValidationRejected,
)
from listing_flow.services.listing_loader import fetch_listing_for_edit
from listing_flow.services.listing_records import draft_from_record
from listing_flow.services.quota import check_listing_quota
from listing_flow.services.step_validation import FLOWS, validate_step
from listing_flow.services.submission import ListingSubmitter, SubmissionResult
from listing_flow.stores.base import RecordStore
from listing_flow.stores.factory import get_store

router = APIRouter()

_STATUS_BY_KIND = {
    NotAuthenticated.kind: 401,
    QuotaExceeded.kind: 403,
    ListingNotFound.kind: 404,
    ValidationRejected.kind: 422,
    StoreUnavailable.kind: 503,
}


def _raise_for(err: SubmissionError) -> None:
    raise HTTPException(status_code=_STATUS_BY_KIND.get(err.kind, 502), detail=err.as_dict())


def _require_user(user: CurrentUser | None) -> CurrentUser:
    if user is None:
        _raise_for(NotAuthenticated("Missing X-User-Id"))
    return user


def _submission_out(result: SubmissionResult, alerts: CollectingAlertSink) -> SubmissionOut:
    if not result.ok:
        _raise_for(result.error)
    return SubmissionOut(
        ok=True,
        listing_id=result.listing_id,
        booking_warning=result.booking_warning,
        alerts=[AlertOut(title=a.title, message=a.message) for a in alerts.alerts],
    )


@router.post("/listing-drafts/validate-step", response_model=StepValidationOut)
async def validate_draft_step(body: StepValidationIn) -> StepValidationOut:
    flow = FLOWS[body.flow]
    res = validate_step(body.step, body.draft, flow)
    return StepValidationOut(
        ok=res.ok,
        next_step=int(res.next_step) if res.next_step is not None else None,
        reason=res.reason,
        ready_to_submit=res.ready_to_submit,
    )


@router.post("/listings", response_model=SubmissionOut, status_code=201)
async def create_listing(
    body: ListingSubmitIn,
    user: CurrentUser | None = Depends(get_request_user),
    store: RecordStore = Depends(get_store),
) -> SubmissionOut:
    user = _require_user(user)

    try:
        quota = await check_listing_quota(store, user.id, business_verified=user.business_verified)
    except StoreUnavailable as e:
        _raise_for(e)
    if not quota.can_create:
        _raise_for(
            QuotaExceeded(
                "Listing limit reached",
                details=f"you already have {quota.used} live listings (limit {quota.limit})",
            )
        )

    alerts = CollectingAlertSink()
    submitter = ListingSubmitter(store, StaticAuthProvider(user), alerts)
    result = await submitter.submit(body.draft, "create")
    return _submission_out(result, alerts)


@router.put("/listings/{listing_id}", response_model=SubmissionOut)
async def update_listing(
    listing_id: str,
    body: ListingSubmitIn,
    user: CurrentUser | None = Depends(get_request_user),
    store: RecordStore = Depends(get_store),
) -> SubmissionOut:
    user = _require_user(user)

    alerts = CollectingAlertSink()
    submitter = ListingSubmitter(store, StaticAuthProvider(user), alerts)
    result = await submitter.submit(body.draft, "update", listing_id=listing_id)
    return _submission_out(result, alerts)


@router.get("/listings/{listing_id}/draft", response_model=ListingDraftOut)
async def get_listing_draft(
    listing_id: str,
    user: CurrentUser | None = Depends(get_request_user),
    store: RecordStore = Depends(get_store),
) -> ListingDraftOut:
    user = _require_user(user)

    try:
        record = await fetch_listing_for_edit(store, listing_id, user.id)
    except StoreUnavailable as e:
        _raise_for(e)
    if record is None:
        _raise_for(ListingNotFound("Listing not found or you do not have permission to edit it."))

    draft = draft_from_record(record, base_url=settings.storage_public_base_url)
    return ListingDraftOut(listing_id=listing_id, draft=draft)


@router.get("/me/listing-quota", response_model=QuotaOut)
async def get_listing_quota(
    user: CurrentUser | None = Depends(get_request_user),
    store: RecordStore = Depends(get_store),
) -> QuotaOut:
    user = _require_user(user)

    try:
        quota = await check_listing_quota(store, user.id, business_verified=user.business_verified)
    except StoreUnavailable as e:
        _raise_for(e)
    return QuotaOut(used=quota.used, limit=quota.limit, remaining=quota.remaining, can_create=quota.can_create)
