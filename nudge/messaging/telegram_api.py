# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                         TELEGRAM BOT API MODULE                            ║
# ║    Minimal HTTPS client for the Bot API methods the weekly run uses.       ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
telegram_api.py: Telegram Bot API client built on requests.
"""
import time
from typing import Any, Dict, Optional, Union

import requests

from utils.error_handling import TelegramAPIError
from utils.logging import logger
from utils.redaction import sanitize_id

API_BASE_URL = "https://api.telegram.org"
# Telegram rejects message texts longer than this
MESSAGE_CHAR_LIMIT = 4096
# Longest flood-control wait honoured before giving up
MAX_RETRY_AFTER_SECONDS = 30

ChatId = Union[int, str]


class TelegramClient:
    """Messaging capability: send a message to a chat, identify the bot."""

    def __init__(self, token: str, session: Optional[requests.Session] = None,
                 timeout: float = 15.0, base_url: str = API_BASE_URL, sleep=time.sleep):
        if not token:
            raise ValueError("A Telegram bot token is required")
        self._token = token
        self.session = session or requests.Session()
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._sleep = sleep

    def _url(self, method: str) -> str:
        return f"{self.base_url}/bot{self._token}/{method}"

    def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(self._url(method), json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            # Exception text may contain the URL, and with it the token
            raise TelegramAPIError(f"{method} request failed: {e.__class__.__name__}") from None

        try:
            data = response.json()
        except ValueError:
            raise TelegramAPIError(
                f"{method} returned a non-JSON response", error_code=response.status_code
            ) from None

        if not data.get("ok"):
            parameters = data.get("parameters") or {}
            raise TelegramAPIError(
                data.get("description") or "Unknown error",
                error_code=data.get("error_code", response.status_code),
                retry_after=parameters.get("retry_after"),
            )
        return data.get("result")

    def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self._post(method, payload)
        except TelegramAPIError as e:
            # Flood control: wait once for the advertised interval, then retry
            if e.error_code == 429 and e.retry_after and e.retry_after <= MAX_RETRY_AFTER_SECONDS:
                logger.warning(f"Telegram rate limit on {method}, retrying after {e.retry_after}s")
                self._sleep(e.retry_after)
                return self._post(method, payload)
            raise

    def get_me(self) -> Dict[str, Any]:
        return self._call("getMe", {})

    def send_message(self, chat_id: ChatId, text: str, parse_mode: Optional[str] = None,
                     disable_web_page_preview: bool = True) -> Dict[str, Any]:
        payload = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": disable_web_page_preview,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode
        result = self._call("sendMessage", payload)
        logger.debug(f"Message delivered to chat {sanitize_id(chat_id)}")
        return result
