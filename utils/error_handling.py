# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                     SCHEDULE NUDGE ERROR HANDLING UTILITIES                ║
# ║ Exception types for the weekly pipeline and helpers that turn low-level    ║
# ║ API errors into short, operator-readable messages.                         ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import json
from typing import Dict, List, Optional

# Third-party imports
import requests
from googleapiclient.errors import HttpError

# Local application imports
from utils.redaction import redact_calendar_paths, sanitize_calendar_id

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ EXCEPTION TYPES                                                            ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class ConfigurationError(Exception):
    """A required setting or credential is missing or unusable."""


class AllCalendarsFailedError(Exception):
    """Every requested calendar source failed to fetch."""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        details = "; ".join(f"{sanitize_calendar_id(e['calendar_id'])}: {e['error']}" for e in errors)
        super().__init__(f"All {len(errors)} calendar source(s) failed to fetch: {details}")


class TelegramAPIError(Exception):
    """The Telegram Bot API rejected a request or could not be reached."""

    def __init__(self, description: str, error_code: Optional[int] = None,
                 retry_after: Optional[int] = None):
        self.description = description
        self.error_code = error_code
        self.retry_after = retry_after
        if error_code:
            super().__init__(f"Telegram API error {error_code}: {description}")
        else:
            super().__init__(f"Telegram API error: {description}")

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ ERROR DESCRIPTION                                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- get_http_status ---
# Extracts the HTTP status code from a Google HttpError or Telegram error.
# Returns: The integer status, or None when the error carries no status.
def get_http_status(error: Exception) -> Optional[int]:
    if isinstance(error, HttpError):
        try:
            return int(error.resp.status)
        except (AttributeError, TypeError, ValueError):
            return None
    if isinstance(error, TelegramAPIError):
        return error.error_code
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None

# --- describe_error ---
# Produces a one-line, human-readable description of an exception.
# Google HttpErrors are reduced to "HTTP <status>: <reason>" using the JSON
# error body when present; everything else falls back to the exception text.
# Args:
#     error: The exception to describe.
# Returns: A short message suitable for the operator report.
def describe_error(error: Exception) -> str:
    if isinstance(error, HttpError):
        status = get_http_status(error)
        reason = None
        try:
            content = error.content.decode("utf-8") if isinstance(error.content, bytes) else error.content
            payload = json.loads(content or "{}")
            reason = payload.get("error", {}).get("message")
        except (ValueError, AttributeError):
            reason = None
        if not reason:
            reason = getattr(error, "reason", None) or str(error)
        message = f"HTTP {status}: {reason}" if status else str(reason)
    elif isinstance(error, requests.exceptions.Timeout):
        message = "Request timed out"
    elif isinstance(error, requests.exceptions.ConnectionError):
        message = f"Connection error: {error}"
    else:
        message = str(error) or error.__class__.__name__
    # Request URLs in error text carry the calendar address
    return redact_calendar_paths(message)
