"""
Test suite for the weekly digest formatter.
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from nudge.calendar.models import Event, WeekWindow
from utils.message_formatter import (
    EMPTY_WEEK_LINE,
    escape_markdown,
    format_event_time,
    format_week_date_range,
    format_weekly_digest,
    split_message_by_lines,
)

SGT = ZoneInfo("Asia/Singapore")


def test_empty_week_message(week_window):
    message = format_weekly_digest([], week_window, timezone=SGT)

    assert message == (
        "📅 *Weekly Schedule Update*\n"
        "*10 Mar - 16 Mar, 2025*\n"
        "\n"
        "You have no events scheduled for the upcoming week. Enjoy your free time! 🎉"
    )


def test_group_name_in_title(week_window):
    message = format_weekly_digest([], week_window, group_name="Family *Chat*", timezone=SGT)
    assert message.splitlines()[0] == "📅 *Weekly Schedule Update - Family Chat*"
    assert EMPTY_WEEK_LINE in message


def test_all_day_listed_before_timed_events(week_window):
    events = [
        Event(datetime(2025, 3, 11, 14, 0, tzinfo=SGT), datetime(2025, 3, 11, 15, 0, tzinfo=SGT), "Review"),
        Event(date(2025, 3, 11), date(2025, 3, 12), "Offsite"),
    ]
    lines = format_weekly_digest(events, week_window, timezone=SGT).splitlines()

    day_index = lines.index("*Tuesday, 11 Mar*")
    assert lines[day_index + 1] == "• All day — Offsite"
    assert lines[day_index + 2] == "• 2:00 PM – 3:00 PM — Review"
    assert lines[-1] == "Have a productive week ahead! 💪"


def test_days_in_ascending_order_with_location(week_window):
    events = [
        Event(datetime(2025, 3, 14, 9, 0, tzinfo=SGT), datetime(2025, 3, 14, 10, 0, tzinfo=SGT), "Late",
              location="Cafe"),
        Event(datetime(2025, 3, 10, 9, 0, tzinfo=SGT), datetime(2025, 3, 10, 10, 0, tzinfo=SGT), "Early"),
    ]
    message = format_weekly_digest(events, week_window, timezone=SGT)

    assert message.index("*Monday, 10 Mar*") < message.index("*Friday, 14 Mar*")
    assert "• 9:00 AM – 10:00 AM — Late\n  📍 Cafe" in message


def test_events_bucketed_by_reference_timezone(week_window):
    """23:30 UTC on Monday is Tuesday 07:30 in Singapore."""
    utc = ZoneInfo("UTC")
    event = Event(datetime(2025, 3, 10, 23, 30, tzinfo=utc), datetime(2025, 3, 11, 0, 30, tzinfo=utc), "Call")
    message = format_weekly_digest([event], week_window, timezone=SGT)

    assert "*Tuesday, 11 Mar*\n• 7:30 AM – 8:30 AM — Call" in message
    assert "Monday" not in message


def test_event_started_before_window_shown_on_first_day(week_window):
    event = Event(date(2025, 3, 8), date(2025, 3, 12), "Conference")
    message = format_weekly_digest([event], week_window, timezone=SGT)
    assert "*Monday, 10 Mar*\n• All day — Conference" in message


def test_titles_are_markdown_escaped(week_window):
    event = Event(date(2025, 3, 12), date(2025, 3, 13), "team_sync *draft*")
    message = format_weekly_digest([event], week_window, timezone=SGT)
    assert "team\\_sync \\*draft\\*" in message


def test_cross_year_range():
    assert format_week_date_range(date(2025, 12, 29), date(2026, 1, 4)) == "*29 Dec, 2025 - 4 Jan, 2026*"


def test_format_event_time_midnight_and_noon():
    event = Event(datetime(2025, 3, 10, 0, 5, tzinfo=SGT), datetime(2025, 3, 10, 12, 0, tzinfo=SGT), "x")
    assert format_event_time(event, SGT) == "12:05 AM – 12:00 PM"


def test_escape_markdown():
    assert escape_markdown("[a]_b`c") == "\\[a]\\_b\\`c"


def test_split_message_by_lines():
    message = "\n".join(["line %02d" % i for i in range(10)])
    chunks = split_message_by_lines(message, 20)

    assert all(len(chunk) <= 20 for chunk in chunks)
    assert "\n".join(chunks) == message
    assert split_message_by_lines("short", 4096) == ["short"]


def test_window_accepted_as_model():
    window = WeekWindow(datetime(2025, 12, 29, tzinfo=SGT), datetime(2026, 1, 4, 23, 59, tzinfo=SGT))
    assert "*29 Dec, 2025 - 4 Jan, 2026*" in format_weekly_digest([], window, timezone=SGT)


def test_backslash_left_as_is(week_window):
    event = Event(date(2025, 3, 12), date(2025, 3, 13), "Backup C:\\tmp")
    message = format_weekly_digest([event], week_window, timezone=SGT)

    assert escape_markdown("C:\\tmp") == "C:\\tmp"
    assert "• All day — Backup C:\\tmp" in message
