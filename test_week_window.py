"""
Test suite for the upcoming-week window calculation.
"""
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from nudge.calendar.week_window import compute_upcoming_week, get_week_start_date

SGT = ZoneInfo("Asia/Singapore")


def test_sunday_evening_targets_next_monday():
    """A run on Sunday 9 Mar 2025 announces 10–16 Mar."""
    window = compute_upcoming_week(datetime(2025, 3, 9, 18, 0, tzinfo=SGT), SGT)

    assert window.start == datetime(2025, 3, 10, 0, 0, tzinfo=SGT)
    assert window.end == datetime(2025, 3, 16, 23, 59, 59, 999000, tzinfo=SGT)


@pytest.mark.parametrize("day", range(3, 10))
def test_every_weekday_maps_to_following_week(day):
    """Any instant in the week of 3 Mar 2025 targets the week starting 10 Mar."""
    reference = datetime(2025, 3, day, 23, 30, tzinfo=SGT)
    window = compute_upcoming_week(reference, SGT)

    current_week_start = datetime(2025, 3, 3, tzinfo=SGT)
    assert window.start == current_week_start + timedelta(days=7)
    assert window.start > reference
    assert window.start.weekday() == 0
    assert (window.start.hour, window.start.minute, window.start.second) == (0, 0, 0)
    assert window.end - window.start == timedelta(days=7) - timedelta(milliseconds=1)


def test_instant_is_converted_into_reference_timezone():
    """Sunday 20:00 UTC is already Monday 04:00 in Singapore, so the target moves a week."""
    reference = datetime(2025, 3, 9, 20, 0, tzinfo=ZoneInfo("UTC"))
    window = compute_upcoming_week(reference, SGT)

    assert window.start == datetime(2025, 3, 17, tzinfo=SGT)


def test_naive_instant_taken_as_local_time():
    window = compute_upcoming_week(datetime(2025, 3, 9, 18, 0), "Asia/Singapore")
    assert window.start == datetime(2025, 3, 10, tzinfo=SGT)


def test_dst_week_keeps_wall_clock_bounds():
    """Bounds stay at local midnight / end of day across a DST change."""
    berlin = ZoneInfo("Europe/Berlin")
    window = compute_upcoming_week(datetime(2025, 3, 20, 12, 0, tzinfo=berlin), berlin)

    assert window.start == datetime(2025, 3, 24, tzinfo=berlin)
    assert window.end == datetime(2025, 3, 30, 23, 59, 59, 999000, tzinfo=berlin)
    assert window.end.utcoffset() == timedelta(hours=2)
    assert window.start.utcoffset() == timedelta(hours=1)


def test_configurable_week_start():
    """With Sunday-first weeks, Saturday 15 Mar targets Sunday 16 Mar."""
    window = compute_upcoming_week(datetime(2025, 3, 15, 9, 0, tzinfo=SGT), SGT, week_start=6)

    assert window.start == datetime(2025, 3, 16, tzinfo=SGT)
    assert window.start.weekday() == 6


def test_invalid_week_start_rejected():
    with pytest.raises(ValueError):
        compute_upcoming_week(datetime(2025, 3, 9, tzinfo=SGT), SGT, week_start=7)


def test_get_week_start_date():
    assert get_week_start_date(datetime(2025, 3, 12).date(), 0) == datetime(2025, 3, 10).date()
    assert get_week_start_date(datetime(2025, 3, 10).date(), 0) == datetime(2025, 3, 10).date()
