# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                           NOTIFICATIONS MODULE                             ║
# ║         Best-effort alerts to the admin chat when a run fails              ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
from datetime import datetime, timedelta
from typing import Dict, Optional

# Local application imports
from utils.error_handling import describe_error
from utils.logging import logger
from utils.message_formatter import escape_markdown
from utils.redaction import sanitize_id

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ GLOBAL VARIABLES                                                           ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Dictionary to track recently sent notifications with timestamps
_recent_notifications: Dict[str, datetime] = {}
# Time to wait between duplicate notifications
_notification_cooldown = timedelta(minutes=15)

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ NOTIFICATION UTILITIES                                                     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- is_notification_allowed ---
# Determines if a notification can be sent based on cooldown settings.
# Args:
#     notification_key: Unique identifier for this notification type
# Returns: Boolean indicating if notification can be sent
def is_notification_allowed(notification_key: str) -> bool:
    if notification_key in _recent_notifications:
        last_sent = _recent_notifications[notification_key]
        if datetime.now() - last_sent < _notification_cooldown:
            logger.debug(f"Notification '{notification_key}' on cooldown")
            return False

    _recent_notifications[notification_key] = datetime.now()
    return True

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ NOTIFICATION FUNCTIONS                                                     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- notify_admin ---
# Sends a plain-text notice to the admin chat.
# Args:
#     messenger: Messaging capability exposing send_message(chat_id, text, ...)
#     admin_chat_id: Chat that receives operator alerts, or None
#     title: Short heading for the notice
#     message: Markdown body
#     notification_key: Optional key for cooldown tracking
# Returns: Boolean indicating if the notification was sent
def notify_admin(
    messenger,
    admin_chat_id: Optional[int],
    title: str,
    message: str,
    notification_key: Optional[str] = None
) -> bool:
    if messenger is None:
        logger.error("Cannot send notifications: messaging client not available")
        return False

    if admin_chat_id is None:
        logger.warning("No admin chat configured for notifications")
        return False

    if notification_key is None:
        notification_key = title.lower().replace(" ", "_")

    if not is_notification_allowed(notification_key):
        return False

    text = f"🔔 *{escape_markdown(title)}*\n\n{message}"
    try:
        messenger.send_message(admin_chat_id, text, parse_mode="Markdown")
    except Exception as e:
        logger.error(f"Failed to send notification to admin {sanitize_id(admin_chat_id)}: {describe_error(e)}")
        return False

    logger.info(f"Sent '{title}' notification to admin {sanitize_id(admin_chat_id)}")
    return True

# --- notify_critical_error ---
# Sends notification with detailed information about a critical exception.
# Args:
#     messenger: Messaging capability
#     admin_chat_id: Chat that receives operator alerts
#     error_context: Description of what the run was doing when the error occurred
#     exception: The exception that was raised
# Returns: Boolean indicating if notification was sent
def notify_critical_error(messenger, admin_chat_id: Optional[int], error_context: str,
                          exception: Exception) -> bool:
    error_type = type(exception).__name__
    notification_key = f"error_{error_type}_{error_context.lower().replace(' ', '_')}"

    message = (
        f"*Error Context:* {escape_markdown(error_context)}\n\n"
        f"*Exception Type:* {escape_markdown(error_type)}\n"
        f"*Error Message:* {escape_markdown(describe_error(exception))}\n\n"
        f"Check the log files for complete details."
    )

    return notify_admin(
        messenger,
        admin_chat_id,
        title="Critical Error Detected",
        message=message,
        notification_key=notification_key
    )
