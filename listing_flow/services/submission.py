from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Literal

from opentelemetry import trace

from listing_flow.core.config import Settings, settings as default_settings
from listing_flow.draft.listing import ListingDraft
from listing_flow.services.alerts import AlertSink, LoggingAlertSink
from listing_flow.services.auth import AuthProvider
from listing_flow.services.errors import (
    DependentWriteFailed,
    ListingNotFound,
    NotAuthenticated,
    PrimaryWriteFailed,
    SubmissionError,
    ValidationRejected,
)
from listing_flow.services.listing_records import build_listing_payload, iter_submit_blockers
from listing_flow.services.review_incentive_sync import sync_review_incentive_settings
from listing_flow.services.service_settings_sync import sync_service_settings
from listing_flow.stores.base import RecordStore
from listing_flow.stores.timeout import TimeoutRecordStore

log = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

SubmitMode = Literal["create", "update"]
SuccessCallback = Callable[[str], "Awaitable[None] | None"]

LISTINGS_TABLE = "listings"

BOOKING_WARNING = (
    "Listing saved but booking settings may not be complete. "
    "Please edit the listing to update booking settings."
)


@dataclass(frozen=True)
class SubmissionResult:
    """
    Aggregated outcome of one submission.

    `ok` reflects the primary write only. The two dependent writes degrade the
    result (booking_warning / incentive_error) without failing it.
    """
    ok: bool
    listing_id: str | None = None
    error: SubmissionError | None = None
    booking_warning: str | None = None
    incentive_error: str | None = None
    record: dict[str, Any] | None = None


class ListingSubmitter:
    def __init__(
        self,
        store: RecordStore,
        auth: AuthProvider,
        alerts: AlertSink | None = None,
        *,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] | None = None,
    ):
        self._store = TimeoutRecordStore(store, settings.store_timeout_seconds)
        self._auth = auth
        self._alerts = alerts or LoggingAlertSink()
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _fail(self, err: SubmissionError) -> SubmissionResult:
        log.warning("submission rejected (%s): %s", err.kind, err.user_message())
        self._alerts.notify("Error", err.user_message())
        return SubmissionResult(ok=False, error=err)

    async def submit(
        self,
        draft: ListingDraft,
        mode: SubmitMode = "create",
        listing_id: str | None = None,
        on_success: SuccessCallback | None = None,
    ) -> SubmissionResult:
        with tracer.start_as_current_span("listing.submit") as span:
            span.set_attribute("listing.mode", mode)
            span.set_attribute("listing.type", draft.listing_type)

            user = await self._auth.get_current_user()
            if user is None:
                return self._fail(NotAuthenticated("You must be logged in to create listings."))

            # Checked again here so submit() is safe to call without the wizard
            reason = next(iter_submit_blockers(draft), None)
            if reason is not None:
                return self._fail(ValidationRejected(reason))
            if mode == "update" and not listing_id:
                return self._fail(ValidationRejected("A listing id is required to update a listing"))

            payload = build_listing_payload(draft, now=self._clock(), settings=self._settings)

            try:
                record = await self._write_primary(payload, mode, listing_id, user.id)
            except PrimaryWriteFailed as e:
                span.set_attribute("listing.error", e.kind)
                return self._fail(e)

            new_id = str(record["id"])
            span.set_attribute("listing.id", new_id)

            booking_warning: str | None = None
            if draft.booking.booking_enabled:
                with tracer.start_as_current_span("listing.sync_service_settings"):
                    try:
                        await sync_service_settings(self._store, new_id, draft)
                    except DependentWriteFailed as e:
                        log.exception("service settings for listing %s not saved: %s", new_id, e.user_message())
                        booking_warning = BOOKING_WARNING
                    except Exception:
                        # The listing is already committed; anything here only degrades the result
                        log.exception("service settings sync crashed for listing %s", new_id)
                        booking_warning = BOOKING_WARNING
                if booking_warning:
                    self._alerts.notify("Warning", BOOKING_WARNING)

            incentive_error: str | None = None
            with tracer.start_as_current_span("listing.sync_review_incentive"):
                try:
                    await sync_review_incentive_settings(self._store, new_id, user.id, draft.review_incentive)
                except DependentWriteFailed as e:
                    # Supplementary; the user is not told
                    log.exception("review incentive for listing %s not saved: %s", new_id, e.user_message())
                    incentive_error = e.user_message()
                except Exception as e:
                    log.exception("review incentive sync crashed for listing %s", new_id)
                    incentive_error = str(e) or type(e).__name__

            verb = "updated" if mode == "update" else "created"
            self._alerts.notify("Success", f"Listing {verb} successfully!")

            if on_success is not None:
                try:
                    maybe = on_success(new_id)
                    if inspect.isawaitable(maybe):
                        await maybe
                except Exception:
                    # The submission already succeeded and was announced
                    log.exception("on_success callback failed for listing %s", new_id)

            return SubmissionResult(
                ok=True,
                listing_id=new_id,
                booking_warning=booking_warning,
                incentive_error=incentive_error,
                record=record,
            )

    async def _write_primary(
        self,
        payload: dict[str, Any],
        mode: SubmitMode,
        listing_id: str | None,
        user_id: str,
    ) -> dict[str, Any]:
        with tracer.start_as_current_span("listing.write_primary"):
            if mode == "update":
                res = await self._store.update(LISTINGS_TABLE, payload, {"id": listing_id, "user_id": user_id})
            else:
                res = await self._store.create(LISTINGS_TABLE, {**payload, "user_id": user_id})

        if res.error:
            log.error(
                "listing %s failed: message=%s details=%s hint=%s code=%s",
                "update" if mode == "update" else "insert",
                res.error.message,
                res.error.details,
                res.error.hint,
                res.error.code,
            )
            raise PrimaryWriteFailed.from_store_error(res.error)

        if not res.data:
            if mode == "update":
                # Wrong id, or a listing owned by someone else
                raise ListingNotFound(
                    "Listing not found",
                    details="no listing with this id belongs to the current user",
                )
            raise PrimaryWriteFailed(
                "Failed to create listing. Please check all required fields.",
                details="the store returned no row for the insert",
            )

        record = res.first
        if not record.get("id"):
            # e.g. a 2xx whose body was not the inserted row
            log.error("listing %s returned a row without an id: %s", mode, sorted(record))
            raise PrimaryWriteFailed(
                "Could not confirm the saved listing",
                details="the store response did not include a listing id",
                code="NO_ID",
            )
        return record
