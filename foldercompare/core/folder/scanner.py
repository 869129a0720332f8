"""
One-level directory scanner for folder comparison.

Lists the immediate children of a directory and snapshots their metadata:
- No recursion
- Case-insensitive ordering by name
- Best-effort: unreadable entries are skipped, unreadable folders are empty
"""

from __future__ import annotations

import fnmatch
import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from foldercompare.core.models import FileEntryMetadata


def sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive ordering key, ties broken by the raw name."""
    return (name.casefold(), name)


@dataclass
class ScanOptions:
    """Options for directory scanning."""
    follow_symlinks: bool = True
    include_hidden: bool = True
    exclude_patterns: list[str] = field(default_factory=list)

    def should_include(self, name: str) -> bool:
        """Check if a child should be listed based on its name."""
        if not self.include_hidden and name.startswith('.'):
            return False

        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(name, pattern):
                return False

        return True


class DirectoryScanner:
    """
    Scans a single directory level.

    The result maps child name to metadata and is ordered by case-insensitive
    name. A fresh mapping is built on every call.
    """

    def __init__(self, options: Optional[ScanOptions] = None):
        self.options = options or ScanOptions()

    def scan(self, path_text: Path | str | None) -> dict[str, FileEntryMetadata]:
        """
        Scan the direct children of a directory.

        Args:
            path_text: Directory to list

        Returns:
            Mapping of child name to metadata; empty if the path is blank,
            missing, not a directory or cannot be listed
        """
        if path_text is None or not str(path_text).strip():
            return {}

        root_path = Path(str(path_text).strip()).expanduser()
        if not root_path.is_dir():
            logging.debug(f"DirectoryScanner - Not a directory: {root_path}")
            return {}

        try:
            with os.scandir(root_path) as it:
                children = sorted(it, key=lambda e: sort_key(e.name))
        except OSError as e:
            logging.warning(f"DirectoryScanner - Could not list {root_path}: {e}")
            return {}

        entries: dict[str, FileEntryMetadata] = {}
        seen: set[str] = set()

        for child in children:
            if not self.options.should_include(child.name):
                continue

            key = child.name.casefold()
            if key in seen:
                logging.info(
                    f"DirectoryScanner - Skipping {child.name!r}: "
                    f"name differs only in case from an earlier entry"
                )
                continue

            metadata = self._get_metadata(child)
            if metadata is None:
                continue

            seen.add(key)
            entries[child.name] = metadata

        return entries

    def _get_metadata(self, entry: os.DirEntry) -> Optional[FileEntryMetadata]:
        """Read attributes of one child, or None if they cannot be read."""
        try:
            stat_result = entry.stat(follow_symlinks=self.options.follow_symlinks)
        except OSError as e:
            logging.debug(f"DirectoryScanner - Failed to stat {entry.path}: {e}")
            return None

        is_directory = stat.S_ISDIR(stat_result.st_mode)

        try:
            modified_at = datetime.fromtimestamp(stat_result.st_mtime)
        except (OSError, OverflowError, ValueError) as e:
            logging.debug(f"DirectoryScanner - Bad modification time for {entry.path}: {e}")
            modified_at = None

        return FileEntryMetadata(
            name=entry.name,
            is_directory=is_directory,
            size=None if is_directory else stat_result.st_size,
            modified_at=modified_at,
        )


def scan_directory(
    path_text: Path | str | None,
    options: Optional[ScanOptions] = None
) -> dict[str, FileEntryMetadata]:
    """Convenience wrapper around DirectoryScanner.scan."""
    return DirectoryScanner(options).scan(path_text)
