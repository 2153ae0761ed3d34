# src/treescout/telemetry/logger/processors.py

"""
Custom structlog processors.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

# Keys callers may pass to steer rendering; never rendered themselves.
EMOJI_KEY = "emoji_key"
INTERNAL_KEYS = frozenset({EMOJI_KEY})

LOG_EMOJIS: dict[Any, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "discover": "🔎",
    "resolve": "🧩",
    "filter": "🚫",
    "path": "📁",
    "load": "📄",
    "success": "🎉",
    "general": "➡️",
}


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji chosen by ``emoji_key`` or by level."""
    emoji_key: Any = event_dict.get(EMOJI_KEY)
    if emoji_key is None:
        level_name = str(event_dict.get("level", method_name)).upper()
        emoji_key = logging.getLevelName(level_name)
    emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str) and not event.startswith(emoji):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops steering keys before rendering."""
    for key in INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict

# 🔼⚙️
