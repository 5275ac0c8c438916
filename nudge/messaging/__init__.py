"""
messaging package: Telegram Bot API transport.
"""
from .telegram_api import MESSAGE_CHAR_LIMIT, TelegramClient

__all__ = ['MESSAGE_CHAR_LIMIT', 'TelegramClient']
