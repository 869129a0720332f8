"""
Recently used folder pairs.

The history is an ordered list of at most ``max_items`` strings, newest
first, stored in QSettings under the application namespace so it survives
restarts. Each entry encodes a left/right pair as ``"<left> <-> <right>"``.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import QSettings


APP_ORGANIZATION = "FolderCompare"
APP_NAME = "FolderCompare"

HISTORY_GROUP = "history"
HISTORY_COUNT_KEY = "count"
MAX_HISTORY_ITEMS = 10
PAIR_SEPARATOR = " <-> "


def format_pair(left: str, right: str) -> str:
    """Encode a folder pair as a history entry."""
    return f"{left}{PAIR_SEPARATOR}{right}"


def parse_pair(entry: str) -> Optional[tuple[str, str]]:
    """Split a history entry back into its two paths, or None if malformed."""
    left, sep, right = entry.partition(PAIR_SEPARATOR)
    if not sep:
        return None
    return left, right


def default_settings() -> QSettings:
    """User-scoped INI settings for the application."""
    return QSettings(
        QSettings.Format.IniFormat,
        QSettings.Scope.UserScope,
        APP_ORGANIZATION,
        APP_NAME,
    )


class HistoryService:
    """
    Manages persistence of the folder pair history.

    Not thread-safe; callers sharing one instance across threads must
    serialize access themselves.
    """

    def __init__(
        self,
        settings: Optional[QSettings] = None,
        max_items: int = MAX_HISTORY_ITEMS
    ):
        self._settings = settings if settings is not None else default_settings()
        self.max_items = max(1, min(max_items, MAX_HISTORY_ITEMS))

    def load_history(self) -> list[str]:
        """Read the stored entries, newest first."""
        self._settings.beginGroup(HISTORY_GROUP)
        try:
            count = self._settings.value(HISTORY_COUNT_KEY, 0, type=int)
            items = []
            for i in range(min(count, self.max_items)):
                value = self._settings.value(str(i), "", type=str)
                if value and value.strip():
                    items.append(value)
            return items
        finally:
            self._settings.endGroup()

    def save_history(self, items: list[str]) -> None:
        """Store entries, dropping anything past the limit."""
        items = list(items or [])[:self.max_items]

        self._settings.beginGroup(HISTORY_GROUP)
        try:
            self._settings.setValue(HISTORY_COUNT_KEY, len(items))
            for i, item in enumerate(items):
                self._settings.setValue(str(i), item)
            # clear remnants
            for i in range(len(items), MAX_HISTORY_ITEMS):
                self._settings.remove(str(i))
        finally:
            self._settings.endGroup()

        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            logging.warning(f"HistoryService - Could not write {self._settings.fileName()}")

    def add_entry(self, entry: str) -> list[str]:
        """
        Push an entry to the front of the history.

        An entry already present is left where it is.
        """
        items = self.load_history()
        if not entry or not entry.strip() or entry in items:
            return items

        items.insert(0, entry)
        items = items[:self.max_items]
        self.save_history(items)
        return items

    def add_pair(self, left: str, right: str) -> list[str]:
        """Record a left/right folder pair."""
        return self.add_entry(format_pair(left, right))

    def pairs(self) -> list[tuple[str, str]]:
        """Stored entries decoded into path pairs, skipping malformed ones."""
        result = []
        for entry in self.load_history():
            pair = parse_pair(entry)
            if pair is not None:
                result.append(pair)
        return result

    def clear(self) -> None:
        self._settings.remove(HISTORY_GROUP)
        self._settings.sync()
