"""
Shared pytest fixtures: in-memory stand-ins for the calendar and messaging
capabilities, and a fixed target week.
"""
import os
import tempfile

# Keep test runs from writing into the production log directory
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "schedulenudge-test-logs"))

from datetime import datetime, time
from zoneinfo import ZoneInfo

import pytest

from nudge.calendar.models import WeekWindow
from utils.error_handling import TelegramAPIError

SGT = ZoneInfo("Asia/Singapore")


class FakeCalendarClient:
    """Calendar capability backed by a dict of calendar id → raw items or exception."""

    def __init__(self, sources=None, metadata=None):
        self.sources = sources or {}
        self.metadata = metadata
        self.calls = []

    def list_events(self, calendar_id, time_min, time_max, timezone=None):
        self.calls.append(calendar_id)
        source = self.sources.get(calendar_id, [])
        if isinstance(source, Exception):
            raise source
        return list(source)

    def get_calendar_metadata(self, calendar_id):
        if isinstance(self.metadata, Exception):
            raise self.metadata
        return self.metadata or {"id": calendar_id, "summary": "Test Calendar"}


class FakeMessenger:
    """Messaging capability that records sends; chats in `failing` are rejected."""

    def __init__(self, failing=None, me=None):
        self.failing = set(failing or ())
        self.sent = []
        self.me = me

    def send_message(self, chat_id, text, parse_mode=None, disable_web_page_preview=True):
        if chat_id in self.failing:
            raise TelegramAPIError("Forbidden: bot was kicked from the group chat", error_code=403)
        self.sent.append((chat_id, text, parse_mode))
        return {"message_id": len(self.sent)}

    def get_me(self):
        if isinstance(self.me, Exception):
            raise self.me
        return self.me or {"id": 1, "username": "nudge_test_bot"}

    def texts_for(self, chat_id):
        return [text for sent_chat, text, _ in self.sent if sent_chat == chat_id]


@pytest.fixture
def sgt():
    return SGT


@pytest.fixture
def week_window():
    """Monday 10 Mar 2025 00:00 → Sunday 16 Mar 2025 23:59:59.999 (Singapore)."""
    return WeekWindow(
        start=datetime(2025, 3, 10, tzinfo=SGT),
        end=datetime.combine(datetime(2025, 3, 16).date(), time(23, 59, 59, 999000), tzinfo=SGT),
    )


@pytest.fixture
def fake_calendar():
    return FakeCalendarClient()


@pytest.fixture
def fake_messenger():
    return FakeMessenger()


def timed_item(event_id, summary, start, end, **extra):
    item = {"id": event_id, "summary": summary, "start": {"dateTime": start}, "end": {"dateTime": end}}
    item.update(extra)
    return item


def all_day_item(event_id, summary, day, end_day=None, **extra):
    item = {"id": event_id, "summary": summary, "start": {"date": day}, "end": {"date": end_day or day}}
    item.update(extra)
    return item
