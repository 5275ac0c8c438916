# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                      PRE-FLIGHT CONNECTIVITY CHECKS                        ║
# ║    Confirms the calendar and messaging APIs are reachable and authorized   ║
# ║    before the weekly run starts.                                           ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
Connectivity probes. Each returns a boolean and never raises; the caller
decides whether to abort the run.
"""
from utils.error_handling import describe_error, get_http_status
from utils.logging import logger
from utils.redaction import sanitize_calendar_id

# --- probe_calendar ---
# Reads the calendar's metadata, the cheapest authorized call.
# Logs a hint for 404 (not shared / wrong id) and 403 (no access).
# Returns: True when the calendar is reachable.
def probe_calendar(client, calendar_id: str = "primary") -> bool:
    masked = sanitize_calendar_id(calendar_id)
    try:
        metadata = client.get_calendar_metadata(calendar_id)
    except Exception as e:
        status = get_http_status(e)
        logger.error(f"Google Calendar connection failed for {masked}: {describe_error(e)}")
        if status == 404:
            logger.error("Calendar not found. Make sure the calendar is shared with the service account "
                         "or the calendar ID is correct.")
        elif status == 403:
            logger.error("Access denied. Make sure the service account has calendar access.")
        elif status == 401:
            logger.error("Authentication failed. Check the service account key.")
        return False
    summary = (metadata or {}).get("summary", "unknown")
    logger.info(f"Google Calendar connection successful - connected to calendar '{summary}'")
    return True

# --- probe_messaging ---
# Calls getMe on the Bot API.
# Returns: True when the bot token is valid and the API is reachable.
def probe_messaging(messenger) -> bool:
    try:
        me = messenger.get_me()
    except Exception as e:
        status = get_http_status(e)
        logger.error(f"Telegram bot connection test failed: {describe_error(e)}")
        if status == 401:
            logger.error("Unauthorized. Check TELEGRAM_BOT_TOKEN.")
        elif status == 404:
            logger.error("Bot API endpoint not found. The bot token is probably malformed.")
        return False
    logger.info(f"Telegram bot connection test successful: {(me or {}).get('username', 'unknown')}")
    return True

# --- run_preflight_checks ---
# Runs both probes (both are always attempted so every problem is logged).
# Returns: True only if both succeed.
def run_preflight_checks(calendar_client, messenger, calendar_id: str = "primary") -> bool:
    calendar_ok = probe_calendar(calendar_client, calendar_id)
    messaging_ok = probe_messaging(messenger)
    if calendar_ok and messaging_ok:
        logger.info("All connections successful")
    return calendar_ok and messaging_ok
