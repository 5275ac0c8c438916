"""
redaction.py: Partial masking of chat and calendar identifiers for log output.

Scheduled runs usually log to a shared CI sink, so chat ids and calendar
addresses are never written in full.
"""

import re
from typing import Optional, Union
from urllib.parse import unquote


def sanitize_id(value: Optional[Union[int, str]]) -> str:
    """Mask a chat/user id, keeping only its last 3 characters.

    >>> sanitize_id(-1001234567890)
    '***********890'
    """
    if value is None or value == "":
        return "undefined"
    id_str = str(value)
    if len(id_str) <= 3:
        return "*" * len(id_str)
    return "*" * (len(id_str) - 3) + id_str[-3:]


def sanitize_calendar_id(calendar_id: Optional[str]) -> str:
    """Mask the local part of a calendar address, keeping the domain.

    >>> sanitize_calendar_id("alice@example.com")
    'a***e@example.com'
    """
    if not calendar_id:
        return "undefined"
    if calendar_id == "primary":
        return "primary"

    local_part, sep, domain = calendar_id.partition("@")
    if not sep:
        if len(calendar_id) <= 3:
            return "*" * len(calendar_id)
        return "*" * (len(calendar_id) - 3) + calendar_id[-3:]

    if len(local_part) <= 2:
        return "*" * len(local_part) + "@" + domain
    return local_part[0] + "*" * (len(local_part) - 2) + local_part[-1] + "@" + domain


# Calendar API URLs embed the calendar address: .../calendars/<id>/events
_calendar_path_pattern = re.compile(r"(calendars/)([^/?#\s'\"<>]+)")


def redact_calendar_paths(text: str) -> str:
    """Mask calendar addresses embedded in Calendar API URLs inside `text`.

    >>> redact_calendar_paths("GET /calendar/v3/calendars/alice%40example.com/events")
    'GET /calendar/v3/calendars/a***e@example.com/events'
    """
    return _calendar_path_pattern.sub(
        lambda match: match.group(1) + sanitize_calendar_id(unquote(match.group(2))), text
    )
