"""
fetching.py: Per-calendar event fetching with isolated failure handling.

Every calendar source is fetched independently; a failing source becomes a
failure result instead of an exception so the remaining sources still run.
"""
import asyncio
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from utils.error_handling import describe_error
from utils.logging import logger
from utils.redaction import sanitize_calendar_id
from utils.timezone_utils import parse_api_datetime
from .models import CalendarFetchResult, Event, FetchSummary, WeekWindow

CANCELLED_STATUS = "cancelled"

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ EVENT NORMALIZATION                                                       ║
# ╚════════════════════════════════════════════════════════════════════════════╝

def is_cancelled(item: Dict[str, Any]) -> bool:
    return item.get("status") == CANCELLED_STATUS or bool(item.get("cancelled"))

def _parse_event_time(container: Dict[str, Any], timezone):
    if container.get("dateTime"):
        return parse_api_datetime(container["dateTime"], timezone)
    if container.get("date"):
        return date.fromisoformat(container["date"])
    return None

def normalize_event(item: Dict[str, Any], timezone=None) -> Event:
    """
    Convert a raw Calendar API item into an Event.

    A date-only start makes the event all-day whatever its end looks like.
    Raises ValueError if the item has no usable start.
    """
    start = _parse_event_time(item.get("start") or {}, timezone)
    if start is None:
        raise ValueError(f"Event {item.get('id', '?')} has no start time")
    end = _parse_event_time(item.get("end") or {}, timezone) or start
    return Event(
        start=start,
        end=end,
        title=(item.get("summary") or "").strip() or "Untitled Event",
        location=(item.get("location") or "").strip() or None,
        cancelled=is_cancelled(item),
        event_id=item.get("id"),
        html_link=item.get("htmlLink"),
    )

def normalize_events(items: Iterable[Dict[str, Any]], timezone=None) -> List[Event]:
    """Normalize raw items, dropping cancelled and unparseable ones. Keeps API order."""
    events = []
    for item in items:
        if is_cancelled(item):
            continue
        try:
            events.append(normalize_event(item, timezone))
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Skipping unparseable event {item.get('id', '?')}: {e}")
    return events

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ FETCHING                                                                  ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- fetch_window ---
# Fetches one calendar's events for the window.
# Args:
#     client: Calendar capability exposing list_events(...).
#     calendar_id: Calendar source id ("primary" or an address).
#     window: The target WeekWindow.
# Returns: A CalendarFetchResult; failures carry error_message and never raise.
def fetch_window(client, calendar_id: str, window: WeekWindow) -> CalendarFetchResult:
    masked = sanitize_calendar_id(calendar_id)
    tz = window.start.tzinfo
    tz_name = getattr(tz, "key", None)
    try:
        logger.info(f"Fetching events for {masked} from {window.start.isoformat()} to {window.end.isoformat()}")
        items = client.list_events(calendar_id, window.start, window.end, tz_name)
        events = normalize_events(items, tz)
    except Exception as e:
        message = describe_error(e)
        logger.error(f"Error fetching calendar {masked}: {message}")
        return CalendarFetchResult(calendar_id=calendar_id, error_message=message)

    logger.info(f"Found {len(events)} events for {masked}")
    return CalendarFetchResult(
        calendar_id=calendar_id,
        events=events,
        window_start=window.start,
        window_end=window.end,
    )

# --- fetch_many ---
# Fetches several calendars concurrently on worker threads.
# Each source writes into its own result slot; slots are merged after all
# fetches complete, so one source's failure never affects another's.
# Args:
#     client: Calendar capability.
#     calendar_ids: Source ids; duplicates are fetched once.
#     window: The target WeekWindow.
#     max_concurrency: Upper bound on simultaneous requests.
# Returns: FetchSummary with successes in `results` and failures in `errors`.
async def fetch_many(client, calendar_ids: Iterable[str], window: WeekWindow,
                     max_concurrency: Optional[int] = 4) -> FetchSummary:
    unique_ids = list(dict.fromkeys(calendar_ids))
    if not unique_ids:
        return FetchSummary()

    semaphore = asyncio.Semaphore(max_concurrency or len(unique_ids))

    async def fetch_one(calendar_id: str) -> CalendarFetchResult:
        async with semaphore:
            return await asyncio.to_thread(fetch_window, client, calendar_id, window)

    slots = await asyncio.gather(*(fetch_one(calendar_id) for calendar_id in unique_ids))

    summary = FetchSummary()
    for result in slots:
        if result.ok:
            summary.results.append(result)
        else:
            summary.errors.append({"calendar_id": result.calendar_id, "error": result.error_message})

    logger.info(f"Calendar fetch completed: {summary.success_count} succeeded, {summary.error_count} failed")
    return summary
