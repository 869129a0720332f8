"""
Exceptions raised by the folder comparison engine.
"""

from __future__ import annotations

from pathlib import Path


class FolderCompareError(Exception):
    """Base class for engine errors."""


class InvalidDirectoryError(FolderCompareError, NotADirectoryError):
    """
    Raised before a batch starts when a source or destination folder is
    missing or not a directory. Nothing has been touched when this is raised.
    """

    def __init__(self, path: Path | str, role: str = "directory"):
        self.path = Path(path) if path else Path()
        self.role = role
        super().__init__(f"{role.capitalize()} is not an existing directory: {path}")
