"""
Folder comparison engine.

Pairs the direct children of two folders by name and flags each pair as:
- Identical (same type, size and modification time)
- Different (metadata differs)
- Left only / right only (orphans)

Classification is metadata-only. Byte-level checks live in
``foldercompare.core.diff.content`` and are only run on request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from foldercompare.core.diff.content import ContentComparator
from foldercompare.core.folder.scanner import DirectoryScanner, ScanOptions, sort_key
from foldercompare.core.models import (
    FileEntryMetadata,
    FolderCompareResult,
    PairedRow,
    RowClassification,
    classify_row,
    metadata_differs,
)

__all__ = [
    "CompareOptions",
    "FolderComparer",
    "RowClassification",
    "align_entries",
    "classify_row",
    "metadata_differs",
]


def align_entries(
    left: Mapping[str, FileEntryMetadata],
    right: Mapping[str, FileEntryMetadata]
) -> list[PairedRow]:
    """
    Merge two name-indexed metadata maps into paired rows.

    Names are matched case-insensitively; each name appears in exactly one
    row. Rows come out in ascending case-insensitive name order.
    """
    merged: dict[str, list[Optional[FileEntryMetadata]]] = {}

    for metadata in left.values():
        merged.setdefault(metadata.key, [None, None])[0] = metadata

    for metadata in right.values():
        merged.setdefault(metadata.key, [None, None])[1] = metadata

    rows = [PairedRow(left=pair[0], right=pair[1]) for pair in merged.values()]
    rows.sort(key=lambda row: sort_key(row.name))
    return rows


@dataclass
class CompareOptions:
    """Options for folder comparison."""
    scan_options: ScanOptions = field(default_factory=ScanOptions)
    chunk_size: int = 65536


class FolderComparer:
    """
    Runs the scan, align and classify pipeline over two folders.

    Every call rescans both sides; nothing is cached between calls.
    """

    def __init__(self, options: Optional[CompareOptions] = None):
        self.options = options or CompareOptions()
        self._scanner = DirectoryScanner(self.options.scan_options)
        self._content = ContentComparator(chunk_size=self.options.chunk_size)

    def compare(
        self,
        left_path: Path | str,
        right_path: Path | str
    ) -> FolderCompareResult:
        """
        Compare the direct children of two directories.

        A blank or invalid path scans as empty, so every entry of the other
        side shows up as an orphan.
        """
        left_entries = self._scanner.scan(left_path)
        right_entries = self._scanner.scan(right_path)

        rows = align_entries(left_entries, right_entries)

        result = FolderCompareResult(
            left_path=str(left_path),
            right_path=str(right_path),
            rows=rows,
            left_count=len(left_entries),
            right_count=len(right_entries),
        )
        logging.debug(f"FolderComparer - {left_path} <-> {right_path}: {result.summary()}")
        return result

    def verify_row(
        self,
        row: PairedRow,
        left_path: Path | str,
        right_path: Path | str
    ) -> bool:
        """
        Byte-level check of one row.

        Files are compared by content, directories by their direct files.
        Orphans and type mismatches are never equal.
        """
        if not row.exists_both:
            return False
        if row.left.is_directory != row.right.is_directory:
            return False

        left_entry = Path(left_path) / row.left.name
        right_entry = Path(right_path) / row.right.name

        if row.left.is_directory:
            return self._content.directories_equal(left_entry, right_entry)
        return self._content.files_equal(left_entry, right_entry)
