# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       TELEGRAM DIGEST FORMATTERS                           ║
# ║ Formats a week of calendar events into a Telegram Markdown digest, grouped ║
# ║ by day in the reference timezone.                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union
from zoneinfo import ZoneInfo

# Local application imports
from utils.timezone_utils import format_clock_time, local_date, resolve_timezone

TITLE = "📅 *Weekly Schedule Update*"
INTRO_LINE = "Here's what you have coming up this week:"
EMPTY_WEEK_LINE = "You have no events scheduled for the upcoming week. Enjoy your free time! 🎉"
CLOSING_LINE = "Have a productive week ahead! 💪"
ALL_DAY_LABEL = "All day"

# Characters with meaning in Telegram's legacy Markdown mode
_MARKDOWN_SPECIAL_CHARS = ("_", "*", "`", "[")

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ HELPER FUNCTIONS                                                           ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- escape_markdown ---
# Escapes user-supplied text (titles, locations) for Telegram legacy Markdown.
# Unescaped '_' or '*' in an event title makes the Bot API reject the message.
def escape_markdown(text: str) -> str:
    for char in _MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, "\\" + char)
    return text

def _bold_safe(text: str) -> str:
    # Escapes are not honoured inside an entity, so drop the delimiter instead
    return text.replace("*", "")

def _short_date(day: date) -> str:
    return f"{day.day} {day.strftime('%b')}"

# --- format_week_date_range ---
# Formats the window as e.g. "*10 Mar - 16 Mar, 2025*", or with both years
# ("*29 Dec, 2025 - 4 Jan, 2026*") when the week crosses a year boundary.
def format_week_date_range(start: Union[date, datetime], end: Union[date, datetime]) -> str:
    start_day = start.date() if isinstance(start, datetime) else start
    end_day = end.date() if isinstance(end, datetime) else end
    if start_day.year == end_day.year:
        return f"*{_short_date(start_day)} - {_short_date(end_day)}, {end_day.year}*"
    return f"*{_short_date(start_day)}, {start_day.year} - {_short_date(end_day)}, {end_day.year}*"

def format_day_header(day: date) -> str:
    return f"*{day.strftime('%A')}, {_short_date(day)}*"

# --- format_event_time ---
# "All day" for date-only events, otherwise "2:00 PM – 3:00 PM" in `tz`.
def format_event_time(event, tz: ZoneInfo) -> str:
    if event.is_all_day:
        return ALL_DAY_LABEL
    start_str = format_clock_time(event.start, tz)
    if isinstance(event.end, datetime):
        return f"{start_str} – {format_clock_time(event.end, tz)}"
    return start_str

def format_event_lines(event, tz: ZoneInfo) -> List[str]:
    lines = [f"• {format_event_time(event, tz)} — {escape_markdown(event.title)}"]
    if event.location:
        lines.append(f"  📍 {escape_markdown(event.location)}")
    return lines

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ GROUPING                                                                   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

def _sort_key(event):
    # All-day events first, keeping their relative order; then timed by instant
    if event.is_all_day:
        return (0, 0.0)
    return (1, event.start.timestamp())

# --- group_events_by_day ---
# Buckets events by their start date in the reference timezone and orders
# each bucket. Events that began before the window (multi-day events still in
# progress) are listed on the window's first day.
# Args:
#     events: Normalized events, cancelled ones already removed.
#     tz: Reference timezone.
#     window_start: First day of the window, or None to skip clamping.
# Returns: Dict of date → sorted events, in ascending date order.
def group_events_by_day(events: Sequence, tz: ZoneInfo, window_start: Optional[date] = None) -> Dict[date, List]:
    grouped = defaultdict(list)
    for event in events:
        day = local_date(event.start, tz)
        if window_start and day < window_start:
            day = window_start
        grouped[day].append(event)
    return {day: sorted(grouped[day], key=_sort_key) for day in sorted(grouped)}

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ DIGEST MESSAGE                                                             ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- format_weekly_digest ---
# Formats the weekly digest for one destination.
# Args:
#     events: Normalized events for the window.
#     window: WeekWindow the events were fetched for.
#     group_name: Optional destination label added to the title.
#     timezone: Reference timezone (ZoneInfo or name); defaults to REFERENCE_TIMEZONE.
# Returns: Telegram Markdown message body.
def format_weekly_digest(events: Sequence, window, group_name: Optional[str] = None,
                         timezone: Optional[Union[str, ZoneInfo]] = None) -> str:
    tz = resolve_timezone(timezone)
    title = f"📅 *Weekly Schedule Update - {_bold_safe(group_name)}*" if group_name else TITLE
    start_day = local_date(window.start, tz)
    end_day = local_date(window.end, tz)
    week_range = format_week_date_range(start_day, end_day)

    if not events:
        return f"{title}\n{week_range}\n\n{EMPTY_WEEK_LINE}"

    lines = [title, week_range, "", INTRO_LINE, ""]
    for day, day_events in group_events_by_day(events, tz, start_day).items():
        lines.append(format_day_header(day))
        for event in day_events:
            lines.extend(format_event_lines(event, tz))
        lines.append("")
    lines.append(CLOSING_LINE)
    return "\n".join(lines)

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ MESSAGE SPLITTING                                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

def split_message_by_lines(message: str, limit: int) -> List[str]:
    """Splits a message by lines, ensuring no chunk exceeds the limit."""
    chunks = []
    current_chunk = ""
    for line in message.split('\n'):
        if len(current_chunk) + len(line) + 1 > limit:
            if current_chunk:
                chunks.append(current_chunk)
            if len(line) > limit:
                # Oversized single line; may break Markdown
                for i in range(0, len(line), limit):
                    chunks.append(line[i:i + limit])
                current_chunk = ""
            else:
                current_chunk = line
        else:
            current_chunk = f"{current_chunk}\n{line}" if current_chunk else line

    if current_chunk:
        chunks.append(current_chunk)
    return chunks
