"""
environ.py: Environment Configuration Loader
Centralized access to critical environment variables with type hints
and helper functions for parsing.
"""

import os
from typing import Optional


def get_bool_env(var_name: str, default: bool = False) -> bool:
    """
    Retrieves an environment variable as a boolean.

    Args:
        var_name: Name of the environment variable to fetch.
        default: Fallback boolean if the variable is not set.

    Returns:
        True or False, based on the environment variable value.
        The environment variable is considered 'true' if it is
        '1', 'true', or 'yes' (case-insensitive).
    """
    val = os.getenv(var_name, str(default)).lower()
    return val in ("1", "true", "yes")


def get_int_env(var_name: str, default: int = 0) -> int:
    """
    Retrieves an environment variable as an integer.

    Args:
        var_name: Name of the environment variable to fetch.
        default: Fallback integer if the variable is not set or invalid.

    Returns:
        The integer value of the environment variable, or 'default' if
        parsing fails or the variable is unset.
    """
    val_str = os.getenv(var_name, None)
    if val_str is None or not val_str.strip():
        return default
    try:
        return int(val_str.strip())
    except ValueError:
        return default


def get_optional_int_env(var_name: str) -> Optional[int]:
    """Like get_int_env, but returns None when the variable is unset or invalid."""
    val_str = os.getenv(var_name, None)
    if val_str is None or not val_str.strip():
        return None
    try:
        return int(val_str.strip())
    except ValueError:
        return None


def get_str_env(var_name: str, default: Optional[str] = "") -> Optional[str]:
    """
    Retrieves an environment variable as a string.

    Args:
        var_name: Name of the environment variable to fetch.
        default: Default string to return if variable is not set.

    Returns:
        The environment variable's value, or 'default' if unset.
    """
    return os.getenv(var_name, default)


# ╔════════════════════════════════════════════════════════════════════╗
# 🔧 Core Variables
# ╚════════════════════════════════════════════════════════════════════╝

DEBUG: bool = get_bool_env("DEBUG", False)
"""
Indicates whether to run in debug mode, enabling verbose logging.
"""

TELEGRAM_BOT_TOKEN: Optional[str] = get_str_env("TELEGRAM_BOT_TOKEN", None)
"""
Telegram bot token used for the Bot API. The run aborts at startup if unset.
"""

ADMIN_USER_ID: Optional[int] = get_optional_int_env("ADMIN_USER_ID")
"""
Telegram chat id of the operator who receives the run diagnostic report.
"""

# ╔════════════════════════════════════════════════════════════════════╗
# 📅 Google Calendar
# ╚════════════════════════════════════════════════════════════════════╝

GOOGLE_SERVICE_ACCOUNT_KEY: Optional[str] = get_str_env("GOOGLE_SERVICE_ACCOUNT_KEY", None)
"""
Inline service account JSON. Takes precedence over the credentials file.
"""

GOOGLE_APPLICATION_CREDENTIALS: str = get_str_env("GOOGLE_APPLICATION_CREDENTIALS", "/app/service_account.json")
"""
Path to the Google service account JSON used for Calendar API calls.
"""

CALENDAR_OWNER_EMAIL: Optional[str] = get_str_env("CALENDAR_OWNER_EMAIL", None)
"""
Optional user to impersonate through domain-wide delegation.
"""

CALENDAR_ID: str = get_str_env("CALENDAR_ID", "primary") or "primary"
"""
Calendar used for the pre-flight connectivity probe.
"""

GROUP_CALENDAR_MAPPINGS: Optional[str] = get_str_env("GROUP_CALENDAR_MAPPINGS", None)
"""
Base64-encoded JSON snapshot of the chat → calendar mapping.
"""

# ╔════════════════════════════════════════════════════════════════════╗
# 🗓️ Week Window
# ╚════════════════════════════════════════════════════════════════════╝

REFERENCE_TIMEZONE: str = get_str_env("REFERENCE_TIMEZONE", "Asia/Singapore") or "Asia/Singapore"
"""
Timezone used for the week window, day grouping and displayed times.
"""

WEEK_OFFSET_DAYS: int = get_int_env("WEEK_OFFSET_DAYS", 7)
"""
Days added to the reference instant before locating the target week.
7 targets the week after the current one.
"""

WEEK_START_DAY: int = get_int_env("WEEK_START_DAY", 0)
"""
First weekday of a week (0 = Monday ... 6 = Sunday).
"""

# ╔════════════════════════════════════════════════════════════════════╗
# 📝 Logging
# ╚════════════════════════════════════════════════════════════════════╝

LOG_DIR: str = get_str_env("LOG_DIR", "/data/logs") or "/data/logs"
"""
Preferred directory for rotating log files.
"""
