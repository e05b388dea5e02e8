from __future__ import annotations

from dataclasses import dataclass

from listing_flow.core.config import Settings, settings as default_settings
from listing_flow.services.errors import StoreUnavailable
from listing_flow.stores.base import RecordStore

# Statuses that occupy a listing slot
LIVE_STATUSES = ("active", "matched", "in_progress")


@dataclass(frozen=True)
class QuotaStatus:
    used: int
    limit: int | None  # None = unlimited

    @property
    def remaining(self) -> int | None:
        if self.limit is None:
            return None
        return max(self.limit - self.used, 0)

    @property
    def can_create(self) -> bool:
        return self.limit is None or self.used < self.limit


async def check_listing_quota(
    store: RecordStore,
    user_id: str,
    *,
    business_verified: bool = False,
    settings: Settings = default_settings,
) -> QuotaStatus:
    res = await store.query("listings", {"user_id": user_id, "status": list(LIVE_STATUSES)}, columns=["id"])
    if res.error:
        raise StoreUnavailable.from_store_error(res.error, prefix="Could not check listing quota")
    limit = None if business_verified else settings.listing_quota_limit
    return QuotaStatus(used=len(res.data), limit=limit)
