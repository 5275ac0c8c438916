# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       CALENDAR API RETRY MODULE                            ║
# ║    Retries transient Google API failures with exponential backoff.         ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
retry.py: API call retries for the Google Calendar client.
"""
import random
import ssl
import time

import requests
from googleapiclient.errors import HttpError

from utils.error_handling import describe_error
from utils.logging import logger

# Upper bound for a single backoff sleep, in seconds
MAX_BACKOFF_SECONDS = 30.0

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ API CALL RETRY MECHANISM                                                  ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- is_retryable_error ---
# Decides whether an exception from an API call is worth another attempt.
# Retryable: HTTP 429 and 5xx, requests network errors, SSL errors and
# OSErrors whose message mentions SSL (socket-level TLS failures).
# Args:
#     error: The exception raised by the call.
# Returns: True if the call should be retried.
def is_retryable_error(error: Exception) -> bool:
    if isinstance(error, HttpError):
        status_code = error.resp.status
        return status_code == 429 or status_code >= 500
    if isinstance(error, (requests.exceptions.RequestException, ssl.SSLError, TimeoutError, ConnectionError)):
        return True
    if isinstance(error, OSError):
        return "ssl" in str(error).lower()
    return False

# --- retry_api_call ---
# Executes an API call, retrying transient failures with exponential backoff
# and jitter. Non-retryable errors (e.g. 403/404) are raised immediately so the
# caller can report them; when retries are exhausted the last error is raised.
# Args:
#     func: Zero-argument callable performing the request (e.g. `request.execute`).
#     max_retries: Maximum number of attempts (default 3).
#     sleep: Sleep function, replaceable in tests.
# Returns: The result of the call.
def retry_api_call(func, max_retries: int = 3, sleep=time.sleep):
    last_exception = None
    for attempt in range(max_retries):
        try:
            return func()
        except Exception as e:
            if not is_retryable_error(e):
                raise
            last_exception = e
            if attempt + 1 >= max_retries:
                break
            backoff = min((2 ** attempt) + random.uniform(0, 1), MAX_BACKOFF_SECONDS)
            logger.warning(
                f"Transient API error, attempt {attempt + 1}/{max_retries}, "
                f"backing off for {backoff:.2f}s: {describe_error(e)}"
            )
            sleep(backoff)
    logger.error(f"All {max_retries} retries failed for API call: {describe_error(last_exception)}")
    raise last_exception
