#
# src/treescout/exceptions.py
#
"""
Exception hierarchy for treescout.
"""

from typing import Any


class TreescoutError(Exception):
    """Base class for all treescout errors."""

    pass


class ConfigurationError(TreescoutError):
    """Raised when configuration is missing, unreadable or invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class InvalidSelectorError(TreescoutError):
    """Raised by a selector factory when its input cannot name anything."""

    pass


class MalformedIdError(TreescoutError):
    """Raised when a unique id string does not match the segment grammar."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Malformed unique id '{text}': {reason}")


class ResolverError(TreescoutError):
    """
    A resolver broke its contract during discovery.

    Always fatal for the discovery run that raised it.
    """

    def __init__(
        self,
        message: str,
        resolver: str | None = None,
        element: Any = None,
        details: Exception | None = None,
    ):
        self.resolver = resolver
        self.element = element
        self.details = details
        full_message = f"[Resolver] {message}"
        if resolver:
            full_message += f" (Resolver: '{resolver}')"
        super().__init__(full_message)
        if details is not None:
            self.add_note(f"Original error: {type(details).__name__}: {details}")

# 🔼⚙️
