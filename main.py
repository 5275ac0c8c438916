#!/usr/bin/env python3
"""
Schedule Nudge - Main Entry Point

Runs one weekly digest pass: reads next week's events from Google Calendar
and posts a summary to every mapped Telegram chat. Meant to be triggered by
an external scheduler (cron, a CI schedule) once a week.
"""

import sys
import signal
import asyncio

from config.group_config import GroupConfigStore
from config.settings import get_config_summary, validate_optional_config, validate_required_config
from nudge.calendar.google_api import GoogleCalendarClient
from nudge.messaging.telegram_api import TelegramClient
from nudge.tasks.health import run_preflight_checks
from nudge.tasks.weekly_update import run_weekly_update
from utils.environ import (
    ADMIN_USER_ID,
    CALENDAR_ID,
    GROUP_CALENDAR_MAPPINGS,
    REFERENCE_TIMEZONE,
    TELEGRAM_BOT_TOKEN,
)
from utils.error_handling import AllCalendarsFailedError, ConfigurationError, describe_error
from utils.logging import get_log_file_location, logger
from utils.notifications import notify_critical_error
from utils.timezone_utils import get_timezone

def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logger.info(f"Received signal {signum}, initiating shutdown...")
    sys.exit(0)

def run() -> int:
    """Execute one weekly run and return the process exit code."""
    if not validate_required_config():
        logger.error("Please set the missing configuration and try again.")
        return 1
    for warning in validate_optional_config():
        logger.warning(warning)
    logger.debug(f"Configuration: {get_config_summary()}")

    store = GroupConfigStore()
    store.load(GROUP_CALENDAR_MAPPINGS)

    try:
        calendar_client = GoogleCalendarClient.from_environment()
        messenger = TelegramClient(TELEGRAM_BOT_TOKEN)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"❌ Failed to initialize clients: {e}")
        return 1

    if not run_preflight_checks(calendar_client, messenger, CALENDAR_ID):
        logger.error("❌ Pre-flight connectivity checks failed")
        return 1

    try:
        report = asyncio.run(run_weekly_update(
            store, calendar_client, messenger,
            admin_chat_id=ADMIN_USER_ID,
            timezone=get_timezone(REFERENCE_TIMEZONE),
        ))
    except AllCalendarsFailedError as e:
        logger.error(f"❌ Weekly update aborted: {e}")
        notify_critical_error(messenger, ADMIN_USER_ID, "Fetching calendars for the weekly update", e)
        return 1
    except Exception as e:
        logger.error(f"❌ Weekly update failed: {describe_error(e)}")
        notify_critical_error(messenger, ADMIN_USER_ID, "Running the weekly update", e)
        return 1

    logger.info(f"✅ Run finished: {report.success_count} delivered, {report.error_count} failed")
    return 0

def main():
    """Main application entry point."""
    exit_code = 0
    try:
        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        logger.info("=" * 60)
        logger.info("📅 Schedule Nudge Weekly Run Starting")
        logger.info("=" * 60)
        logger.info(f"Log file: {get_log_file_location()}")

        exit_code = run()

    except KeyboardInterrupt:
        logger.info("Run stopped by user")
    except Exception as e:
        logger.error(f"Fatal error during weekly run: {describe_error(e)}")
        exit_code = 1
    finally:
        logger.info("📅 Schedule Nudge Weekly Run Complete")
    sys.exit(exit_code)

if __name__ == "__main__":
    main()
