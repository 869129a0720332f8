"""
Byte-level content comparison of files and folders.
"""

from foldercompare.core.diff.content import (
    ContentComparator,
    files_equal,
    directories_equal,
)

__all__ = [
    'ContentComparator',
    'files_equal',
    'directories_equal',
]
