"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Optional

from foldercompare.core.folder.comparer import CompareOptions
from foldercompare.core.folder.operations import OperationOptions
from foldercompare.core.folder.scanner import ScanOptions
from foldercompare.services.history import MAX_HISTORY_ITEMS


@dataclass
class ComparisonSettings:
    """Settings for scanning and comparing folders."""
    include_hidden: bool = True
    follow_symlinks: bool = True
    exclude_patterns: list[str] = field(default_factory=list)
    chunk_size: int = 65536


@dataclass
class OperationSettings:
    """Settings for copy, move and delete."""
    preserve_timestamps: bool = False


@dataclass
class HistorySettings:
    """Settings for the folder pair history."""
    max_items: int = MAX_HISTORY_ITEMS


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    operations: OperationSettings = field(default_factory=OperationSettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    log_level: str = "WARNING"

    def to_scan_options(self) -> ScanOptions:
        return ScanOptions(
            follow_symlinks=self.comparison.follow_symlinks,
            include_hidden=self.comparison.include_hidden,
            exclude_patterns=list(self.comparison.exclude_patterns),
        )

    def to_compare_options(self) -> CompareOptions:
        return CompareOptions(
            scan_options=self.to_scan_options(),
            chunk_size=self.comparison.chunk_size,
        )

    def to_operation_options(self) -> OperationOptions:
        return OperationOptions(preserve_timestamps=self.operations.preserve_timestamps)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'FolderCompare' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'foldercompare' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring malformed settings in {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not write {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception:
                logging.exception("SettingsManager - Settings observer failed")

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        comparison_data = data.get('comparison', {})
        defaults = ComparisonSettings()
        comparison = ComparisonSettings(
            include_hidden=bool(comparison_data.get('include_hidden', defaults.include_hidden)),
            follow_symlinks=bool(comparison_data.get('follow_symlinks', defaults.follow_symlinks)),
            exclude_patterns=[str(p) for p in comparison_data.get('exclude_patterns', [])],
            chunk_size=_positive_int(comparison_data.get('chunk_size'), defaults.chunk_size),
        )

        operations = OperationSettings(
            preserve_timestamps=bool(
                data.get('operations', {}).get('preserve_timestamps', False)
            ),
        )

        history = HistorySettings(
            max_items=min(
                _positive_int(data.get('history', {}).get('max_items'), MAX_HISTORY_ITEMS),
                MAX_HISTORY_ITEMS,
            ),
        )

        return ApplicationSettings(
            comparison=comparison,
            operations=operations,
            history=history,
            log_level=str(data.get('log_level', 'WARNING')).upper(),
        )


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
