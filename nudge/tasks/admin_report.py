"""
Admin diagnostic report for a weekly run.

Operator-only message: calendar fetch results, calendar errors, group delivery
results, successful and failed deliveries, completion time, in that order.
"""
from datetime import datetime
from typing import Optional, Sequence

from utils.message_formatter import escape_markdown
from utils.timezone_utils import format_clock_time, resolve_timezone


def format_completion_time(now: datetime, tz) -> str:
    local = now.astimezone(tz) if now.tzinfo else now.replace(tzinfo=tz)
    return f"{local.day} {local.strftime('%b %Y')}, {format_clock_time(local, tz)} ({escape_markdown(tz.key)})"


def format_admin_summary(outcomes: Sequence, fetch_summary, now: Optional[datetime] = None,
                         timezone=None) -> str:
    tz = resolve_timezone(timezone)
    now = now or datetime.now(tz)
    lines = ["🔧 *Admin Debug: Weekly Update Summary*", ""]

    lines.append("📅 *Calendar Fetch Results:*")
    lines.append(f"• {fetch_summary.success_count} calendars fetched successfully")
    lines.append(f"• {fetch_summary.error_count} calendars failed")
    lines.append("")

    if fetch_summary.errors:
        lines.append("❌ *Calendar Errors:*")
        for error in fetch_summary.errors:
            lines.append(f"• {escape_markdown(error['calendar_id'])}: {escape_markdown(error['error'])}")
        lines.append("")

    successful = [o for o in outcomes if o.success]
    failed = [o for o in outcomes if not o.success]

    lines.append("📤 *Group Delivery Results:*")
    lines.append(f"• {len(successful)} groups received updates")
    lines.append(f"• {len(failed)} groups failed")
    lines.append("")

    if successful:
        lines.append("✅ *Successful Deliveries:*")
        for outcome in successful:
            lines.append(
                f"• {escape_markdown(outcome.group_name)}: {outcome.event_count} events "
                f"({escape_markdown(outcome.calendar_id)})"
            )
        lines.append("")

    if failed:
        lines.append("❌ *Failed Deliveries:*")
        for outcome in failed:
            lines.append(f"• {escape_markdown(outcome.group_name)}: {escape_markdown(outcome.error_message or 'Unknown error')}")
        lines.append("")

    lines.append(f"⏰ *Summary completed at:* {format_completion_time(now, tz)}")
    return "\n".join(lines)
