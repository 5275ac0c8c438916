# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       WEEKLY UPDATE PIPELINE                               ║
# ║    Window → fetch unique calendars → deliver per chat → admin report.      ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
One scheduled weekly run. Triggered once per interval by an external
scheduler; no state carries over between runs.
"""
from datetime import datetime
from typing import Optional

from nudge.calendar.fetching import fetch_many
from nudge.calendar.week_window import compute_upcoming_week
from utils.error_handling import AllCalendarsFailedError
from utils.logging import logger
from utils.timezone_utils import resolve_timezone
from .delivery import RunReport, deliver_weekly_updates


async def run_weekly_update(store, calendar_client, messenger, admin_chat_id: Optional[int] = None,
                            timezone=None, now: Optional[datetime] = None) -> RunReport:
    """
    Fetch next week's events for every mapped calendar and deliver the digests.

    Raises AllCalendarsFailedError when every requested calendar failed;
    partial failures are reported in the returned RunReport.
    """
    tz = resolve_timezone(timezone)
    groups = store.get_all_groups()
    if not groups:
        logger.info("No group mappings configured - nothing to deliver")
        return await deliver_weekly_updates(groups, None, messenger, admin_chat_id, tz)

    window = compute_upcoming_week(now or datetime.now(tz), tz)
    logger.info(f"Target week: {window.start.date().isoformat()} to {window.end.date().isoformat()} ({tz.key})")

    calendar_ids = store.unique_calendar_ids()
    logger.info(f"Fetching {len(calendar_ids)} unique calendars for {len(groups)} groups")
    fetch_summary = await fetch_many(calendar_client, calendar_ids, window)

    if calendar_ids and fetch_summary.success_count == 0:
        raise AllCalendarsFailedError(fetch_summary.errors)

    report = await deliver_weekly_updates(groups, fetch_summary, messenger, admin_chat_id, tz)
    logger.info(f"Weekly update completed: {report.success_count} sent, {report.error_count} failed")
    return report
