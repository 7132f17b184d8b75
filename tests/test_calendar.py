import pytest
from datetime import date, datetime, timedelta, timezone

from roster.services.calendar import (
    as_utc,
    first_sunday_utc,
    month_bounds_utc,
    next_year_month,
    week_index,
)

def test_month_bounds_are_utc_and_inclusive():
    start, end = month_bounds_utc(2025, 11)
    assert start == datetime(2025, 11, 1, tzinfo=timezone.utc)
    assert end.date() == date(2025, 11, 30)
    assert end.tzinfo == timezone.utc
    assert end.hour == 23 and end.minute == 59

def test_month_bounds_rejects_invalid_month():
    with pytest.raises(ValueError):
        month_bounds_utc(2025, 13)

def test_first_sunday():
    # 01/11/2025 é sábado
    assert first_sunday_utc(2025, 11) == date(2025, 11, 2)
    # 01/06/2025 já é domingo
    assert first_sunday_utc(2025, 6) == date(2025, 6, 1)

def test_week_index_counts_from_first_sunday():
    assert week_index(datetime(2025, 11, 2, 13, tzinfo=timezone.utc), 2025, 11) == 0
    assert week_index(datetime(2025, 11, 8, 23, tzinfo=timezone.utc), 2025, 11) == 0
    assert week_index(datetime(2025, 11, 9, 0, tzinfo=timezone.utc), 2025, 11) == 1
    assert week_index(datetime(2025, 11, 30, 13, tzinfo=timezone.utc), 2025, 11) == 4

def test_week_index_before_first_sunday_is_zero():
    assert week_index(datetime(2025, 11, 1, 20, tzinfo=timezone.utc), 2025, 11) == 0

def test_week_index_uses_utc_day():
    # 08/11 22h em UTC-3 já é 09/11 em UTC
    brt = timezone(timedelta(hours=-3))
    assert week_index(datetime(2025, 11, 8, 22, tzinfo=brt), 2025, 11) == 1

def test_as_utc_treats_naive_as_utc():
    naive = datetime(2025, 11, 2, 10)
    assert as_utc(naive) == datetime(2025, 11, 2, 10, tzinfo=timezone.utc)

def test_next_year_month():
    assert next_year_month(2025, 11) == (2025, 12)
    assert next_year_month(2025, 12) == (2026, 1)
