from __future__ import annotations

from listing_flow.stores.base import StoreError


class SubmissionError(Exception):
    """
    Base of everything that can stop (or degrade) a submission. Instances are
    returned inside SubmissionResult, not raised to the caller.
    """
    kind = "submission_error"

    def __init__(self, message: str, *, details: str | None = None, hint: str | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint
        self.code = code

    @classmethod
    def from_store_error(cls, err: StoreError, *, prefix: str | None = None) -> "SubmissionError":
        message = f"{prefix}: {err.message}" if prefix else err.message
        return cls(message, details=err.details, hint=err.hint, code=err.code)

    def user_message(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def as_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind,
            "message": self.user_message(),
            "details": self.details,
            "hint": self.hint,
            "code": self.code,
        }


class ValidationRejected(SubmissionError):
    kind = "validation_rejected"


class NotAuthenticated(SubmissionError):
    kind = "not_authenticated"


class QuotaExceeded(SubmissionError):
    kind = "quota_exceeded"


class PrimaryWriteFailed(SubmissionError):
    kind = "primary_write_failed"


class ListingNotFound(PrimaryWriteFailed):
    kind = "not_found"


class DependentWriteFailed(SubmissionError):
    kind = "dependent_write_failed"


class StoreUnavailable(SubmissionError):
    # A read the flow depends on (quota, edit loading) failed
    kind = "store_unavailable"
