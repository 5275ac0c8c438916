"""
Schedule Nudge: weekly calendar digests delivered to Telegram chats.
"""

__version__ = "1.0.0"
