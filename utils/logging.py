# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       SCHEDULE NUDGE LOGGING SETUP                         ║
# ║ Colored console output plus a daily-rotating log file, both fed from a     ║
# ║ queue so worker threads never block on I/O.                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import atexit
import logging
import os
import sys
import tempfile
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from queue import Queue
from typing import Optional

# Third-party imports
from colorlog import ColoredFormatter

# Local application imports
from utils.environ import DEBUG, LOG_DIR

LOGGER_NAME = "schedulenudge"
LOG_FILE_NAME = "nudge.log"
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO

# Tried in order when LOG_DIR is not writable
FALLBACK_DIRS = [
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs"),
    tempfile.gettempdir(),
]

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ LOG FILE LOCATION                                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- find_log_file ---
# Returns the log file path in the first writable directory, or None when
# no candidate can be created (console-only logging).
def find_log_file() -> Optional[str]:
    for directory in [LOG_DIR] + FALLBACK_DIRS:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            # The logger is not configured yet
            print(f"Notice: Could not use log directory {directory}: {e}", file=sys.stderr)
            continue
        if os.access(directory, os.W_OK):
            return os.path.join(directory, LOG_FILE_NAME)
    return None

active_log_file = find_log_file()

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ LOGGER INITIALIZATION                                                      ║
# ╚════════════════════════════════════════════════════════════════════════════╝

def _build_handlers():
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
    ))
    console_handler.setLevel(LOG_LEVEL)
    handlers.append(console_handler)

    if active_log_file:
        file_handler = TimedRotatingFileHandler(
            active_log_file, when="midnight", backupCount=7, encoding="utf-8", delay=True
        )
        file_handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)s [%(filename)s:%(lineno)d]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        file_handler.setLevel(LOG_LEVEL)
        handlers.append(file_handler)

    return handlers

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(LOG_LEVEL)

if not getattr(logger, "_initialized", False):
    _queue = Queue(-1)
    _handlers = _build_handlers()
    _listener = QueueListener(_queue, *_handlers, respect_handler_level=True)
    logger.addHandler(QueueHandler(_queue))
    _listener.start()
    logger._listener = _listener
    logger._initialized = True

    # Stopping the listener drains the queue before the handlers close
    def _shutdown_logging():
        _listener.stop()
        for handler in _handlers:
            handler.close()

    atexit.register(_shutdown_logging)

    if not active_log_file:
        logger.warning("File logging is disabled - using console only")

# --- get_log_file_location ---
# Returns: The active log file path, or a message indicating console-only logging.
def get_log_file_location():
    return active_log_file or "Console only (File logging disabled)"
