"""
Folder comparison module.

Provides functionality for:
- One-level directory scanning
- Pairing and classifying entries of two folders
- Bulk copy, move and delete between folders
"""

from foldercompare.core.folder.scanner import (
    DirectoryScanner,
    ScanOptions,
    scan_directory,
)
from foldercompare.core.folder.comparer import (
    FolderComparer,
    CompareOptions,
    align_entries,
    classify_row,
)
from foldercompare.core.folder.operations import (
    FileOperations,
    OperationOptions,
    copy_recursive,
    delete_recursive,
    move_path,
)

__all__ = [
    # Scanner
    'DirectoryScanner',
    'ScanOptions',
    'scan_directory',
    # Comparer
    'FolderComparer',
    'CompareOptions',
    'align_entries',
    'classify_row',
    # Operations
    'FileOperations',
    'OperationOptions',
    'copy_recursive',
    'delete_recursive',
    'move_path',
]
