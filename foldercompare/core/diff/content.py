"""
Byte-level content comparison.

Provides:
- Exact file equality with a size short-circuit
- Shallow directory equality (direct regular files only)
- First differing offset for two files

Every check answers False instead of raising when either side cannot be
read.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


DEFAULT_CHUNK_SIZE = 65536


class ContentComparator:
    """Compares files and directories by their bytes."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def files_equal(self, left_path: Path | str, right_path: Path | str) -> bool:
        """
        Check whether two regular files have identical content.

        Sizes are compared first; content is only read when they match.
        """
        left_path = Path(left_path)
        right_path = Path(right_path)

        try:
            if not (left_path.is_file() and right_path.is_file()):
                return False

            if left_path.stat().st_size != right_path.stat().st_size:
                return False

            return self._first_mismatch(left_path, right_path) is None
        except OSError as e:
            logging.debug(f"ContentComparator - Could not compare {left_path} and {right_path}: {e}")
            return False

    def directories_equal(self, left_path: Path | str, right_path: Path | str) -> bool:
        """
        Check whether two directories hold the same regular files.

        Only direct children are considered and subdirectories are ignored.
        File names must match exactly (case-sensitive) and every pair must
        have identical content.
        """
        left_path = Path(left_path)
        right_path = Path(right_path)

        try:
            if not (left_path.is_dir() and right_path.is_dir()):
                return False

            left_names = self._regular_file_names(left_path)
            right_names = self._regular_file_names(right_path)
        except OSError as e:
            logging.debug(f"ContentComparator - Could not list {left_path} or {right_path}: {e}")
            return False

        if left_names != right_names:
            return False

        for name in sorted(left_names):
            if not self.files_equal(left_path / name, right_path / name):
                return False

        return True

    def first_difference(
        self,
        left_path: Path | str,
        right_path: Path | str
    ) -> Optional[int]:
        """
        Offset of the first differing byte, or None when the files match.

        A shorter file differs at its end. Unreadable input raises OSError.
        """
        return self._first_mismatch(Path(left_path), Path(right_path))

    def _first_mismatch(self, left_path: Path, right_path: Path) -> Optional[int]:
        offset = 0
        with open(left_path, 'rb') as lf, open(right_path, 'rb') as rf:
            while True:
                left_chunk = lf.read(self.chunk_size)
                right_chunk = rf.read(self.chunk_size)

                if left_chunk != right_chunk:
                    for i, (lb, rb) in enumerate(zip(left_chunk, right_chunk)):
                        if lb != rb:
                            return offset + i
                    # Different lengths
                    return offset + min(len(left_chunk), len(right_chunk))

                if not left_chunk:
                    return None

                offset += len(left_chunk)

    @staticmethod
    def _regular_file_names(directory: Path) -> set[str]:
        with os.scandir(directory) as it:
            return {entry.name for entry in it if entry.is_file()}


_default_comparator = ContentComparator()


def files_equal(left_path: Path | str, right_path: Path | str) -> bool:
    """Byte-exact file equality using the default chunk size."""
    return _default_comparator.files_equal(left_path, right_path)


def directories_equal(left_path: Path | str, right_path: Path | str) -> bool:
    """Shallow directory equality using the default chunk size."""
    return _default_comparator.directories_equal(left_path, right_path)
