"""
Configuration validation for Schedule Nudge.

Checks the environment once at startup so a misconfigured run fails before
any calendar or chat is contacted.
"""

import os
from typing import Any, Dict, List

from utils.environ import (
    ADMIN_USER_ID,
    CALENDAR_OWNER_EMAIL,
    DEBUG,
    GOOGLE_APPLICATION_CREDENTIALS,
    GOOGLE_SERVICE_ACCOUNT_KEY,
    GROUP_CALENDAR_MAPPINGS,
    REFERENCE_TIMEZONE,
    TELEGRAM_BOT_TOKEN,
    WEEK_OFFSET_DAYS,
    WEEK_START_DAY,
)
from utils.logging import logger

# ╔════════════════════════════════════════════════════════════════════╗
# ║ 📋 Configuration Validation                                        ║
# ╚════════════════════════════════════════════════════════════════════╝

def get_missing_config() -> List[str]:
    """Names of required settings that are unset."""
    missing = []
    if not TELEGRAM_BOT_TOKEN:
        missing.append("TELEGRAM_BOT_TOKEN")
    if not GOOGLE_SERVICE_ACCOUNT_KEY and not (
        GOOGLE_APPLICATION_CREDENTIALS and os.path.exists(GOOGLE_APPLICATION_CREDENTIALS)
    ):
        missing.append("GOOGLE_SERVICE_ACCOUNT_KEY or GOOGLE_APPLICATION_CREDENTIALS")
    return missing

def validate_required_config() -> bool:
    """Validate that all required configuration is present."""
    missing_vars = get_missing_config()
    if missing_vars:
        logger.error(f"Missing required environment variables: {', '.join(missing_vars)}")
        return False
    if not 0 <= WEEK_START_DAY <= 6:
        logger.error(f"WEEK_START_DAY must be between 0 (Monday) and 6 (Sunday), got {WEEK_START_DAY}")
        return False
    return True

def validate_optional_config() -> List[str]:
    """Validate optional configuration and return warnings."""
    warnings = []
    if ADMIN_USER_ID is None:
        warnings.append("ADMIN_USER_ID not set - the run diagnostic report will not be sent")
    if not GROUP_CALENDAR_MAPPINGS:
        warnings.append("GROUP_CALENDAR_MAPPINGS not set - no chats will receive updates")
    return warnings

def get_config_summary() -> Dict[str, Any]:
    """Get a summary of current configuration. Never includes secret values."""
    return {
        "debug_mode": DEBUG,
        "telegram_token_set": bool(TELEGRAM_BOT_TOKEN),
        "admin_configured": ADMIN_USER_ID is not None,
        "inline_service_account": bool(GOOGLE_SERVICE_ACCOUNT_KEY),
        "domain_wide_delegation": bool(CALENDAR_OWNER_EMAIL),
        "mappings_configured": bool(GROUP_CALENDAR_MAPPINGS),
        "reference_timezone": REFERENCE_TIMEZONE,
        "week_offset_days": WEEK_OFFSET_DAYS,
        "week_start_day": WEEK_START_DAY,
    }
