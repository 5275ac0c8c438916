"""
timezone_utils.py: Standardized timezone handling across the application

This module provides consistent timezone handling functions so that event
times are bucketed and displayed in the reference timezone, regardless of the
offset the calendar source reports them in.
"""

from datetime import datetime, date, time
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from dateutil import parser as date_parser

from utils.environ import REFERENCE_TIMEZONE

logger = logging.getLogger("schedulenudge")

# Fallback when the configured reference timezone is invalid
DEFAULT_TIMEZONE = "UTC"

# Common timezone mappings for user-friendly configuration
COMMON_TIMEZONE_ALIASES = {
    "est": "America/New_York",
    "cst": "America/Chicago",
    "mst": "America/Denver",
    "pst": "America/Los_Angeles",
    "sgt": "Asia/Singapore",
    "gmt": "UTC",
    "utc": "UTC"
}

def get_timezone(tz_name: Optional[str]) -> ZoneInfo:
    """
    Get a ZoneInfo object for the specified timezone name.

    Args:
        tz_name: Timezone name or alias

    Returns:
        ZoneInfo object for the timezone

    Falls back to UTC if the timezone is invalid.
    """
    if not tz_name:
        return ZoneInfo(DEFAULT_TIMEZONE)

    tz_name = tz_name.strip()
    alias = COMMON_TIMEZONE_ALIASES.get(tz_name.lower())
    if alias:
        tz_name = alias

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Invalid timezone '{tz_name}', falling back to {DEFAULT_TIMEZONE}: {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)

def get_reference_timezone() -> ZoneInfo:
    """The configured reference timezone (REFERENCE_TIMEZONE)."""
    return get_timezone(REFERENCE_TIMEZONE)

def resolve_timezone(timezone: Optional[Union[str, ZoneInfo]]) -> ZoneInfo:
    """Accept a ZoneInfo, a name, or None (reference timezone)."""
    if timezone is None:
        return get_reference_timezone()
    if isinstance(timezone, str):
        return get_timezone(timezone)
    return timezone

def parse_api_datetime(dt_str: str, timezone: Optional[ZoneInfo] = None) -> datetime:
    """
    Parse an RFC 3339 timestamp from the Calendar API into an aware datetime.

    Timestamps without an offset are taken to be in `timezone` (the timeZone the
    events were requested in). Raises ValueError on malformed input.
    """
    dt = date_parser.isoparse(dt_str.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone or get_reference_timezone())
    return dt

def to_timezone(dt: datetime, timezone: ZoneInfo) -> datetime:
    """Convert an aware datetime into `timezone`; naive values are assumed local to it."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone)
    return dt.astimezone(timezone)

def local_date(value: Union[date, datetime], timezone: ZoneInfo) -> date:
    """Calendar date of a date or datetime as seen in `timezone`."""
    if isinstance(value, datetime):
        return to_timezone(value, timezone).date()
    return value

def start_of_day(day: date, timezone: ZoneInfo) -> datetime:
    """Local midnight of `day` in `timezone`."""
    return datetime.combine(day, time.min, tzinfo=timezone)

def format_clock_time(dt: datetime, timezone: ZoneInfo) -> str:
    """12-hour clock time without a leading zero, e.g. '2:00 PM'."""
    local = to_timezone(dt, timezone)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
