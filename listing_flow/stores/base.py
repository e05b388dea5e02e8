from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence


@dataclass(frozen=True)
class StoreError:
    message: str
    details: str | None = None
    hint: str | None = None
    code: str | None = None

    def user_message(self) -> str:
        # "message: details" when the store gave details
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def as_dict(self) -> dict[str, Any]:
        return {"message": self.message, "details": self.details, "hint": self.hint, "code": self.code}


@dataclass(frozen=True)
class StoreResult:
    """
    Outcome of one record-store call. `data` is the list of affected/matched
    rows; `error` is set instead when the store rejected the call.
    """
    data: list[dict[str, Any]] = field(default_factory=list)
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def first(self) -> dict[str, Any] | None:
        return self.data[0] if self.data else None


class RecordStore(Protocol):
    async def create(self, table: str, payload: Mapping[str, Any]) -> StoreResult:
        ...

    async def update(self, table: str, payload: Mapping[str, Any], match: Mapping[str, Any]) -> StoreResult:
        ...

    async def query(
        self,
        table: str,
        match: Mapping[str, Any],
        columns: Sequence[str] | None = None,
    ) -> StoreResult:
        ...

    async def delete(self, table: str, match: Mapping[str, Any]) -> StoreResult:
        ...
