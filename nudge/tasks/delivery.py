# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       WEEKLY DIGEST DELIVERY MODULE                        ║
# ║    Sends each configured chat the digest for its calendar, recording a     ║
# ║    per-chat outcome, then reports the run to the admin chat.               ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
Fan-out delivery of weekly digests.

Each chat is delivered independently: a missing calendar result or a rejected
send is recorded as that chat's failed outcome and the loop moves on.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import List, Optional, Sequence

from nudge.calendar.models import WeekWindow
from nudge.messaging.telegram_api import MESSAGE_CHAR_LIMIT
from utils.error_handling import describe_error
from utils.logging import logger
from utils.message_formatter import format_weekly_digest, split_message_by_lines
from utils.redaction import sanitize_calendar_id, sanitize_id
from .admin_report import format_admin_summary

PARSE_MODE = "Markdown"

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ RESULT TYPES                                                              ║
# ╚════════════════════════════════════════════════════════════════════════════╝

@dataclass
class DeliveryOutcome:
    group_id: int
    group_name: str
    calendar_id: str
    success: bool
    event_count: int = 0
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None


@dataclass
class DiagnosticOutcome:
    sent: bool
    admin_chat_id: Optional[int] = None
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None


@dataclass
class RunReport:
    success_count: int = 0
    error_count: int = 0
    outcomes: List[DeliveryOutcome] = field(default_factory=list)
    diagnostic: Optional[DiagnosticOutcome] = None

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ SENDING                                                                   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- send_markdown_message ---
# Sends a Markdown message, split on line boundaries to fit Telegram's limit.
# The blocking client call runs on a worker thread.
async def send_markdown_message(messenger, chat_id: int, text: str) -> None:
    for chunk in split_message_by_lines(text, MESSAGE_CHAR_LIMIT):
        await asyncio.to_thread(messenger.send_message, chat_id, chunk, parse_mode=PARSE_MODE)

# --- deliver_to_group ---
# Formats and sends the digest for one chat.
# Returns: DeliveryOutcome; never raises.
async def deliver_to_group(group, fetch_summary, messenger, timezone=None) -> DeliveryOutcome:
    masked_chat = sanitize_id(group.group_id)
    calendar_data = fetch_summary.find(group.calendar_id)
    if calendar_data is None:
        error_msg = f"No calendar data found for {group.calendar_id}"
        logger.error(
            f"Group {masked_chat}: no calendar data found for {sanitize_calendar_id(group.calendar_id)}"
        )
        return DeliveryOutcome(group.group_id, group.group_name, group.calendar_id, False,
                               error_message=error_msg)

    event_count = len(calendar_data.events)
    try:
        window = _window_of(calendar_data)
        message = format_weekly_digest(calendar_data.events, window, group.group_name, timezone)
        logger.info(f"Sending update to group {masked_chat} with {event_count} events")
        await send_markdown_message(messenger, group.group_id, message)
    except Exception as e:
        error_msg = describe_error(e)
        logger.error(f"❌ Failed to send to group {masked_chat}: {error_msg}")
        return DeliveryOutcome(group.group_id, group.group_name, group.calendar_id, False,
                               error_message=error_msg)

    logger.info(f"✅ Successfully sent to group {masked_chat}")
    return DeliveryOutcome(group.group_id, group.group_name, group.calendar_id, True,
                           event_count=event_count, sent_at=datetime.now(dt_timezone.utc))

def _window_of(calendar_data):
    return WeekWindow(calendar_data.window_start, calendar_data.window_end)

# --- send_admin_summary ---
# Sends the run diagnostic report to the admin chat, if one is configured.
# Returns: DiagnosticOutcome; a failed send is logged and recorded, not raised.
async def send_admin_summary(outcomes: Sequence[DeliveryOutcome], fetch_summary, messenger,
                             admin_chat_id: Optional[int], timezone=None,
                             now: Optional[datetime] = None) -> DiagnosticOutcome:
    if admin_chat_id is None:
        logger.info("No admin user configured - skipping admin debugging summary")
        return DiagnosticOutcome(sent=False, error_message="No admin user configured")
    try:
        report = format_admin_summary(outcomes, fetch_summary, now=now, timezone=timezone)
        await send_markdown_message(messenger, admin_chat_id, report)
    except Exception as e:
        error_msg = describe_error(e)
        logger.error(f"Failed to send admin debugging summary: {error_msg}")
        return DiagnosticOutcome(sent=False, admin_chat_id=admin_chat_id, error_message=error_msg)
    logger.info(f"📧 Admin debugging summary sent to {sanitize_id(admin_chat_id)}")
    return DiagnosticOutcome(sent=True, admin_chat_id=admin_chat_id, sent_at=datetime.now(dt_timezone.utc))

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ FAN-OUT                                                                   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- deliver_weekly_updates ---
# Delivers every chat's digest, then the admin report.
# Args:
#     groups: GroupMapping records to deliver to.
#     fetch_summary: FetchSummary from the calendar fetch stage.
#     messenger: Messaging capability exposing send_message(chat_id, text, parse_mode=...).
#     admin_chat_id: Chat that receives the diagnostic report, or None.
#     timezone: Reference timezone for formatting.
#     now: Completion timestamp for the report (defaults to the current time).
# Returns: RunReport with success/error counts and per-chat outcomes.
async def deliver_weekly_updates(groups: Sequence, fetch_summary, messenger,
                                 admin_chat_id: Optional[int] = None, timezone=None,
                                 now: Optional[datetime] = None) -> RunReport:
    if not groups:
        logger.info("No groups configured - skipping group deliveries")
        return RunReport(diagnostic=DiagnosticOutcome(sent=False, error_message="No groups configured"))

    logger.info(f"Sending weekly updates to {len(groups)} configured groups")
    report = RunReport()
    for group in groups:
        outcome = await deliver_to_group(group, fetch_summary, messenger, timezone)
        report.outcomes.append(outcome)
        if outcome.success:
            report.success_count += 1
        else:
            report.error_count += 1

    report.diagnostic = await send_admin_summary(
        report.outcomes, fetch_summary, messenger, admin_chat_id, timezone, now
    )
    logger.info(
        f"Multi-group delivery completed: {report.success_count} groups succeeded, "
        f"{report.error_count} groups failed"
    )
    return report
