"""
Test suite for weekly digest delivery and the admin report.
"""
from datetime import datetime
from unittest.mock import Mock
from zoneinfo import ZoneInfo

import pytest

from conftest import FakeCalendarClient, FakeMessenger, all_day_item, timed_item
from config.group_config import GroupConfigStore, GroupMapping
from nudge.calendar.fetching import fetch_many
from nudge.calendar.models import CalendarFetchResult, FetchSummary
from nudge.tasks.admin_report import format_admin_summary
from nudge.tasks.delivery import deliver_to_group, deliver_weekly_updates

SGT = ZoneInfo("Asia/Singapore")
ADMIN = 777
NOW = datetime(2025, 3, 9, 18, 0, tzinfo=SGT)


def _store():
    store = GroupConfigStore()
    store.add_group(-1001, "primary", "Family")
    store.add_group(-1002, "a@co.com", "Team A")
    store.add_group(-1003, "b@co.com", "Team B")
    return store


async def _three_source_summary(week_window):
    client = FakeCalendarClient({
        "primary": [all_day_item("1", "Holiday", "2025-03-12")],
        "a@co.com": [
            timed_item("2", "Sync", "2025-03-11T14:00:00+08:00", "2025-03-11T15:00:00+08:00"),
            timed_item("3", "Retro", "2025-03-13T10:00:00+08:00", "2025-03-13T11:00:00+08:00"),
        ],
        "b@co.com": RuntimeError("invalid_grant: account not found"),
    })
    return await fetch_many(client, ["primary", "a@co.com", "b@co.com"], week_window)


@pytest.mark.asyncio
async def test_partial_fetch_failure_delivers_to_healthy_groups(week_window):
    summary = await _three_source_summary(week_window)
    messenger = FakeMessenger()

    report = await deliver_weekly_updates(_store().get_all_groups(), summary, messenger,
                                          admin_chat_id=ADMIN, timezone=SGT, now=NOW)

    assert (summary.success_count, summary.error_count) == (2, 1)
    assert report.success_count == 2
    assert report.error_count == 1
    failed = [o for o in report.outcomes if not o.success]
    assert failed[0].group_id == -1003
    assert failed[0].error_message == "No calendar data found for b@co.com"
    assert [o.event_count for o in report.outcomes if o.success] == [1, 2]

    assert messenger.texts_for(-1003) == []
    assert "Team A" in messenger.texts_for(-1002)[0]
    assert all(parse_mode == "Markdown" for _, _, parse_mode in messenger.sent)

    admin_text = messenger.texts_for(ADMIN)[0]
    assert "• 2 calendars fetched successfully" in admin_text
    assert "• 1 calendars failed" in admin_text
    assert "❌ *Calendar Errors:*\n• b@co.com: invalid\\_grant: account not found" in admin_text
    assert report.diagnostic.sent is True


@pytest.mark.asyncio
async def test_send_failure_is_isolated(week_window):
    summary = await _three_source_summary(week_window)
    messenger = FakeMessenger(failing={-1001})
    groups = [GroupMapping(-1001, "primary", "Family"), GroupMapping(-1002, "a@co.com", "Team A")]

    report = await deliver_weekly_updates(groups, summary, messenger, timezone=SGT)

    assert report.success_count == 1
    assert report.error_count == 1
    assert report.outcomes[0].error_message == "Telegram API error 403: Forbidden: bot was kicked from the group chat"
    assert len(messenger.texts_for(-1002)) == 1


@pytest.mark.asyncio
async def test_no_groups_is_a_noop(week_window):
    messenger = FakeMessenger()
    report = await deliver_weekly_updates([], FetchSummary(), messenger, admin_chat_id=ADMIN)

    assert report.success_count == 0 and report.error_count == 0
    assert report.outcomes == []
    assert report.diagnostic.sent is False
    assert messenger.sent == []


@pytest.mark.asyncio
async def test_admin_report_failure_is_recorded_not_raised(week_window):
    summary = await _three_source_summary(week_window)
    messenger = FakeMessenger(failing={ADMIN})

    report = await deliver_weekly_updates([GroupMapping(-1001, "primary", "Family")], summary, messenger,
                                          admin_chat_id=ADMIN, timezone=SGT, now=NOW)

    assert report.success_count == 1
    assert report.diagnostic.sent is False
    assert "403" in report.diagnostic.error_message


@pytest.mark.asyncio
async def test_no_admin_configured(week_window):
    summary = await _three_source_summary(week_window)
    messenger = FakeMessenger()

    report = await deliver_weekly_updates([GroupMapping(-1001, "primary", "Family")], summary, messenger,
                                          timezone=SGT)

    assert report.diagnostic.sent is False
    assert report.diagnostic.error_message == "No admin user configured"
    assert [chat for chat, _, _ in messenger.sent] == [-1001]


@pytest.mark.asyncio
async def test_empty_calendar_gets_empty_week_message(week_window):
    summary = FetchSummary(results=[
        CalendarFetchResult("primary", [], week_window.start, week_window.end)
    ])
    messenger = Mock()

    outcome = await deliver_to_group(GroupMapping(-1001, "primary", "Family"), summary, messenger, SGT)

    assert outcome.success and outcome.event_count == 0
    chat_id, text = messenger.send_message.call_args.args
    assert chat_id == -1001
    assert text.endswith("Enjoy your free time! 🎉")
    assert messenger.send_message.call_args.kwargs == {"parse_mode": "Markdown"}


def test_admin_summary_layout():
    summary = FetchSummary(
        results=[CalendarFetchResult("primary")],
        errors=[],
    )
    outcomes = [Mock(success=True, group_name="Family", event_count=3, calendar_id="primary")]

    text = format_admin_summary(outcomes, summary, now=NOW, timezone=SGT)

    assert text.startswith("🔧 *Admin Debug: Weekly Update Summary*")
    assert "Calendar Errors" not in text
    assert "Failed Deliveries" not in text
    assert "• Family: 3 events (primary)" in text
    assert text.endswith("⏰ *Summary completed at:* 9 Mar 2025, 6:00 PM (Asia/Singapore)")
