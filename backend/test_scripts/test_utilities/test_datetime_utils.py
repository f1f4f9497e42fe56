"""
Test datetime utilities.
All test is independent of the others, so help use pytest features.
"""
from datetime import date, datetime, timezone

import pytest

from backend.app.utils.datetime_utils import add_months, ensure_utc, parse_ISO_date, today_date, utcnow


# ============================================================================
# TESTS: utcnow / today_date
# ============================================================================

def test_utcnow_is_timezone_aware():
    """utcnow() returns an aware datetime in UTC."""
    result = utcnow()
    assert isinstance(result, datetime)
    assert result.tzinfo == timezone.utc


def test_utcnow_returns_current_time():
    before = datetime.now(timezone.utc)
    result = utcnow()
    after = datetime.now(timezone.utc)
    assert before <= result <= after


def test_today_date_matches_utc_date():
    assert today_date() == datetime.now(timezone.utc).date()


# ============================================================================
# TESTS: add_months
# ============================================================================

@pytest.mark.parametrize("start, months, expected", [
    (date(2025, 1, 15), 1, date(2025, 2, 15)),
    (date(2025, 11, 15), 3, date(2026, 2, 15)),
    (date(2025, 1, 31), 1, date(2025, 2, 28)),
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2025, 3, 31), 1, date(2025, 4, 30)),
    (date(2025, 5, 10), 0, date(2025, 5, 10)),
    (date(2025, 5, 10), 24, date(2027, 5, 10)),
    ])
def test_add_months(start, months, expected):
    """Calendar month shift with the day clamped to the month length."""
    assert add_months(start, months) == expected


def test_add_months_from_month_end_does_not_drift():
    """Each billing date is computed from the anchor, so Jan 31 + 2 months is Mar 31."""
    anchor = date(2025, 1, 31)
    assert add_months(anchor, 2) == date(2025, 3, 31)


# ============================================================================
# TESTS: parse_ISO_date / ensure_utc
# ============================================================================

def test_parse_iso_date_from_string():
    assert parse_ISO_date("2025-06-30") == date(2025, 6, 30)


def test_parse_iso_date_from_datetime():
    assert parse_ISO_date(datetime(2025, 6, 30, 12, 0)) == date(2025, 6, 30)


def test_parse_iso_date_invalid_string():
    with pytest.raises(ValueError, match="ISO date"):
        parse_ISO_date("30/06/2025")


def test_parse_iso_date_invalid_type():
    with pytest.raises(TypeError):
        parse_ISO_date(20250630)


def test_ensure_utc_naive():
    naive = datetime(2025, 1, 1, 10, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc


def test_ensure_utc_keeps_aware():
    aware = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert ensure_utc(aware) is aware
