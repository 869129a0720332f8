"""
Core data models for the folder comparison engine.

This module defines the value types shared by the scanner, the
aligner/classifier, the content comparator and the file operation engine:
- Entry metadata snapshots
- Paired rows and their derived classification
- Operation targets and batch results
- Folder comparison results

All models are:
- UI-agnostic (can be used with any frontend)
- Immutable where practical (recomputed on every scan, never patched)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Iterator, Optional


DATE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Enumerations
# =============================================================================

class RowStatus(Enum):
    """Status of a paired row."""
    IDENTICAL = auto()   # Both sides present, same type, size and mtime
    DIFFERENT = auto()   # Both sides present, metadata differs
    LEFT_ONLY = auto()   # Entry exists only in the left folder
    RIGHT_ONLY = auto()  # Entry exists only in the right folder


class OperationKind(Enum):
    """Bulk file operation."""
    COPY = "copy"
    MOVE = "move"
    DELETE = "delete"


# =============================================================================
# Entry Models
# =============================================================================

@dataclass(frozen=True)
class FileEntryMetadata:
    """Snapshot of one directory entry taken during a scan."""
    name: str
    is_directory: bool
    size: Optional[int] = None  # None for directories
    modified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.is_directory and self.size is not None:
            object.__setattr__(self, 'size', None)

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return self.name.casefold()

    @property
    def display_name(self) -> str:
        if self.is_directory:
            return self.name + os.sep
        return self.name

    @property
    def size_display(self) -> str:
        """Byte count as text, empty for directories."""
        if self.is_directory or self.size is None:
            return ""
        return str(self.size)

    @property
    def modified_display(self) -> str:
        """Local modification time as text, empty when unknown."""
        if self.modified_at is None:
            return ""
        moment = self.modified_at
        if moment.tzinfo is not None:
            moment = moment.astimezone()
        return moment.strftime(DATE_TIME_FORMAT)


@dataclass(frozen=True)
class RowClassification:
    """Flags derived from a paired row."""
    orphan_left: bool = False
    orphan_right: bool = False
    different: bool = False

    @property
    def status(self) -> RowStatus:
        if self.orphan_left:
            return RowStatus.LEFT_ONLY
        if self.orphan_right:
            return RowStatus.RIGHT_ONLY
        if self.different:
            return RowStatus.DIFFERENT
        return RowStatus.IDENTICAL


@dataclass(frozen=True)
class PairedRow:
    """
    One aligned row of a left/right comparison.

    At least one side is always present. Rows are rebuilt from scratch on
    every alignment, so they carry no identity across scans.
    """
    left: Optional[FileEntryMetadata] = None
    right: Optional[FileEntryMetadata] = None

    def __post_init__(self) -> None:
        if self.left is None and self.right is None:
            raise ValueError("PairedRow needs at least one side")

    @property
    def name(self) -> str:
        """Entry name, preferring the left side's spelling."""
        return (self.left or self.right).name

    @property
    def key(self) -> str:
        return self.name.casefold()

    @property
    def exists_both(self) -> bool:
        return self.left is not None and self.right is not None

    @property
    def classification(self) -> RowClassification:
        return classify_row(self)

    @property
    def is_orphan_left(self) -> bool:
        return self.classification.orphan_left

    @property
    def is_orphan_right(self) -> bool:
        return self.classification.orphan_right

    @property
    def is_different(self) -> bool:
        return self.classification.different

    @property
    def status(self) -> RowStatus:
        return self.classification.status


def classify_row(row: PairedRow) -> RowClassification:
    """Derive orphan and difference flags from metadata only."""
    left, right = row.left, row.right

    if left is not None and right is None:
        return RowClassification(orphan_left=True)
    if right is not None and left is None:
        return RowClassification(orphan_right=True)

    return RowClassification(different=metadata_differs(left, right))


def metadata_differs(left: FileEntryMetadata, right: FileEntryMetadata) -> bool:
    """Check type, size (files only) and modification time."""
    if left.is_directory != right.is_directory:
        return True

    if not left.is_directory and left.size != right.size:
        return True

    # One timestamp missing counts as a difference
    return left.modified_at != right.modified_at


# =============================================================================
# Operation Models
# =============================================================================

@dataclass(frozen=True)
class TransferTarget:
    """An entry selected for a bulk copy, move or delete."""
    name: str
    is_directory: bool = False

    @classmethod
    def from_metadata(cls, metadata: FileEntryMetadata) -> 'TransferTarget':
        return cls(name=metadata.name, is_directory=metadata.is_directory)


@dataclass
class OperationResult:
    """
    Aggregate outcome of a batch operation.

    Unpacks as ``(success_count, fail_count)``.
    """
    success_count: int = 0
    fail_count: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)  # (name, error)

    @property
    def total(self) -> int:
        return self.success_count + self.fail_count

    @property
    def has_failures(self) -> bool:
        return self.fail_count > 0

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, name: str, message: str) -> None:
        self.fail_count += 1
        self.failures.append((name, message))

    def merge(self, other: 'OperationResult') -> None:
        """Fold another result into this one."""
        self.success_count += other.success_count
        self.fail_count += other.fail_count
        self.failures.extend(other.failures)

    def __iter__(self) -> Iterator[int]:
        yield self.success_count
        yield self.fail_count

    def __str__(self) -> str:
        return f"{self.success_count} succeeded, {self.fail_count} failed"


# =============================================================================
# Folder Comparison Models
# =============================================================================

@dataclass
class FolderCompareResult:
    """Result of one scan-pair-classify pass over two folders."""
    left_path: str
    right_path: str
    rows: list[PairedRow] = field(default_factory=list)
    left_count: int = 0
    right_count: int = 0

    def count(self, status: RowStatus) -> int:
        return sum(1 for row in self.rows if row.status == status)

    @property
    def identical_count(self) -> int:
        return self.count(RowStatus.IDENTICAL)

    @property
    def different_count(self) -> int:
        return self.count(RowStatus.DIFFERENT)

    @property
    def left_only_count(self) -> int:
        return self.count(RowStatus.LEFT_ONLY)

    @property
    def right_only_count(self) -> int:
        return self.count(RowStatus.RIGHT_ONLY)

    @property
    def is_identical(self) -> bool:
        return all(row.status == RowStatus.IDENTICAL for row in self.rows)

    def iter_by_status(self, status: RowStatus) -> Iterator[PairedRow]:
        for row in self.rows:
            if row.status == status:
                yield row

    def find(self, name: str) -> Optional[PairedRow]:
        """Find a row by case-insensitive name."""
        key = name.casefold()
        for row in self.rows:
            if row.key == key:
                return row
        return None

    def summary(self) -> str:
        return (
            f"{len(self.rows)} entries: "
            f"{self.identical_count} identical, "
            f"{self.different_count} different, "
            f"{self.left_only_count} left only, "
            f"{self.right_only_count} right only"
        )
