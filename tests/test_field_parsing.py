import pytest

from listing_flow.services.field_parsing import (
    format_number,
    normalize_calendar_date,
    parse_array_field,
    parse_timestamp,
    to_number,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, []),
        ([], []),
        (["a", "b"], ["a", "b"]),
        ('["a", "b"]', ["a", "b"]),
        ("", []),
        ("null", []),
        ('{"id": "x"}', [{"id": "x"}]),
        ("not json", ["not json"]),
        (42, []),
    ],
)
def test_parse_array_field(raw, expected):
    assert parse_array_field(raw) == expected


def test_to_number_never_raises():
    assert to_number("50") == 50.0
    assert to_number(" 12.5 ") == 12.5
    assert to_number("1,200") == 1200.0
    assert to_number("1,234,567.5") == 1234567.5
    assert to_number("12,50") is None
    assert to_number("1,2,3") is None
    assert to_number("") is None
    assert to_number("abc") is None
    assert to_number("nan") is None
    assert to_number(None) is None
    assert to_number(True) is None


def test_format_number_drops_trailing_zero():
    assert format_number(50.0) == "50"
    assert format_number(12.5) == "12.5"
    assert format_number(None) == ""


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2025-12-225", None),
        ("2025-02-30", None),
        ("2025-13-01", None),
        ("25-02-28", None),
        ("", None),
        ("2025-02-28", "2025-02-28"),
        ("2024-02-29", "2024-02-29"),
    ],
)
def test_normalize_calendar_date(raw, expected):
    assert normalize_calendar_date(raw) == expected


def test_parse_timestamp_treats_naive_as_utc():
    dt = parse_timestamp("2026-03-01T10:00:00")
    assert dt.isoformat() == "2026-03-01T10:00:00+00:00"
    assert parse_timestamp("2026-03-01T10:00:00Z") == dt
    assert parse_timestamp("tomorrow") is None
