"""
Worker for the scan, pair and classify pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject

from foldercompare.core.folder.comparer import CompareOptions, FolderComparer
from foldercompare.core.models import FolderCompareResult
from foldercompare.workers.base_worker import BaseWorker


class FolderCompareWorker(BaseWorker):
    """
    Worker for comparing two folders off the calling thread.

    The comparison itself is one short synchronous pass, so there is
    nothing to cancel midway; cancelling only suppresses `finished`.
    """

    def __init__(
        self,
        left_path: str | Path,
        right_path: str | Path,
        options: Optional[CompareOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.left_path = left_path
        self.right_path = right_path
        self.options = options or CompareOptions()

    def do_work(self) -> FolderCompareResult:
        self.report_status(f"Comparing {self.left_path} and {self.right_path}...")

        comparer = FolderComparer(self.options)
        result = comparer.compare(self.left_path, self.right_path)

        self.report_status(result.summary())
        return result
