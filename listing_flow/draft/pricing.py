from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


BudgetType = Literal["fixed", "range", "price_list", "hourly", "auction", "per_project", "per_hour"]


# --- Optional ISO 4217 validation (only if pycountry is installed) ---
def _load_iso4217() -> set[str] | None:
    try:
        import pycountry  # type: ignore
        return {c.alpha_3 for c in pycountry.currencies}
    except Exception:
        return None


_ISO4217: set[str] | None = _load_iso4217()


def normalize_currency(value: str | None, default: str = "GBP") -> str:
    """
    Upper-case a currency code; anything that is not a 3-letter (known) code
    falls back to the default. Never raises: the form keeps whatever the
    picker sent and submission persists a usable code.
    """
    code = (value or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        return default
    if _ISO4217 is not None and code not in _ISO4217:
        return default
    return code


def _to_text(v: object) -> str:
    # Price inputs are form text; numbers coming from storage or API clients are rendered back
    if v is None:
        return ""
    if isinstance(v, bool):
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


class PriceListItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    service_name: str = Field(default="", alias="serviceName")
    price: str = ""

    @field_validator("service_name", "price", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str:
        return _to_text(v)
