from __future__ import annotations

import json
import logging
import math
import re
from datetime import date, datetime, timezone
from typing import Any

log = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_array_field(raw: Any) -> list[Any]:
    """
    Array columns come back either as native lists or as JSON text, depending
    on the store and on how old the row is. Anything else degrades to [] or to
    a single-element list holding the raw string.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, tuple):
        return list(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
        except ValueError:
            log.debug("array field is not JSON, wrapping raw text")
            return [raw]
        if isinstance(parsed, list):
            return parsed
        if parsed is None:
            return []
        return [parsed]
    log.warning("unexpected array field type %s", type(raw).__name__)
    return []


_THOUSANDS = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


def to_number(value: Any) -> float | None:
    # Form text -> float; blanks and junk become None, never an exception
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        # "1,200" is a thousands separator; "12,50" is not a number we accept
        if _THOUSANDS.match(text):
            text = text.replace(",", "")
        try:
            f = float(text)
        except ValueError:
            log.debug("ignoring non-numeric value %r", value)
            return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def format_number(value: Any) -> str:
    """Render a stored number back into form text: 50.0 -> "50", None -> ""."""
    f = to_number(value)
    if f is None:
        return ""
    if f.is_integer():
        return str(int(f))
    return str(f)


def normalize_calendar_date(value: Any) -> str | None:
    """
    Keep a preferred date only if it is `YYYY-MM-DD` and a real calendar day.
    "2025-12-225" and "2025-02-30" both become None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not _DATE_RE.match(text):
        return None
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        return None
    # Round trip guards against lenient parsers
    if parsed.isoformat() != text:
        return None
    return text


def parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            log.debug("ignoring unparseable timestamp %r", value)
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Any) -> str:
    dt = parse_timestamp(value)
    return dt.isoformat() if dt is not None else ""


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
