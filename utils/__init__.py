from .validators import validate_calendar_id, parse_chat_id
from .redaction import sanitize_id, sanitize_calendar_id
from .message_formatter import (
    format_weekly_digest,
    format_week_date_range,
    format_event_time,
    escape_markdown,
    split_message_by_lines,
)

__all__ = [
    'validate_calendar_id',
    'parse_chat_id',
    'sanitize_id',
    'sanitize_calendar_id',
    'format_weekly_digest',
    'format_week_date_range',
    'format_event_time',
    'escape_markdown',
    'split_message_by_lines',
]
