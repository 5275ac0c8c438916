"""
week_window.py: Computes the [start, end] range of the week to announce.

The scheduled run fires near the end of a week, so the window targets the
following week: the reference instant is pushed forward by WEEK_OFFSET_DAYS
before the week containing it is located.
"""
from datetime import datetime, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from utils.environ import WEEK_OFFSET_DAYS, WEEK_START_DAY
from utils.timezone_utils import resolve_timezone, start_of_day
from .models import WeekWindow

END_OF_DAY = time(23, 59, 59, 999000)


def get_week_start_date(day, week_start: int = WEEK_START_DAY):
    """Date of the first weekday of the week containing `day`."""
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def compute_upcoming_week(
    reference_instant: datetime,
    reference_timezone: Optional[Union[str, ZoneInfo]] = None,
    week_offset_days: int = WEEK_OFFSET_DAYS,
    week_start: int = WEEK_START_DAY,
) -> WeekWindow:
    """
    Return the week window following the one that contains `reference_instant`.

    Args:
        reference_instant: The moment the run is for. Naive values are taken
            to already be wall-clock time in the reference timezone.
        reference_timezone: Zone (or zone name) in which weeks are counted.
        week_offset_days: Days added before locating the week (7 = next week).
        week_start: First weekday, 0 = Monday ... 6 = Sunday.
    """
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be between 0 and 6, got {week_start}")
    tz = resolve_timezone(reference_timezone)
    if reference_instant.tzinfo is None:
        local = reference_instant.replace(tzinfo=tz)
    else:
        local = reference_instant.astimezone(tz)

    target_day = (local + timedelta(days=week_offset_days)).date()
    first_day = get_week_start_date(target_day, week_start)
    last_day = first_day + timedelta(days=6)

    # Built from dates so DST transitions inside the week keep wall-clock bounds
    return WeekWindow(
        start=start_of_day(first_day, tz),
        end=datetime.combine(last_day, END_OF_DAY, tzinfo=tz),
    )
