# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                         VALIDATION UTILITIES                              ║
# ║          Calendar source and chat id validators for mapping input         ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import re
from typing import Any, Optional, Tuple

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CALENDAR ID VALIDATION                                                     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

PRIMARY_CALENDAR_ID = "primary"

_calendar_email_pattern = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# --- validate_calendar_id ---
# Checks that a calendar source id is either the "primary" sentinel or
# email-shaped (local-part "@" domain with at least one dot).
# Args:
#     calendar_id: Input value to check.
# Returns:
#     True if the id is acceptable, False otherwise.
def validate_calendar_id(calendar_id: Any) -> bool:
    if not calendar_id or not isinstance(calendar_id, str):
        return False
    if calendar_id == PRIMARY_CALENDAR_ID:
        return True
    return bool(_calendar_email_pattern.match(calendar_id))

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CHAT ID VALIDATION                                                         ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- parse_chat_id ---
# Parses a Telegram chat id from user input.
# Group chats have negative ids, private chats positive ones; zero is never valid.
# Args:
#     raw: String or int from the command line or a snapshot.
# Returns:
#     Tuple (chat_id or None, error_message).
def parse_chat_id(raw: Any) -> Tuple[Optional[int], str]:
    if isinstance(raw, bool):
        return None, f"Invalid chat id: {raw!r}"
    try:
        chat_id = int(str(raw).strip())
    except (TypeError, ValueError):
        return None, f"Invalid chat id: {raw!r}. Must be a number."
    if chat_id == 0:
        return None, "Chat id cannot be 0."
    return chat_id, ""
