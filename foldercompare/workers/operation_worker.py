"""
Worker for bulk copy, move and delete.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from foldercompare.core.folder.operations import FileOperations, OperationOptions
from foldercompare.core.models import OperationKind, OperationResult, TransferTarget
from foldercompare.workers.base_worker import BaseWorker, ProgressInfo


class FileOperationWorker(BaseWorker):
    """
    Runs a batch through FileOperations one target at a time.

    Progress is reported after every target and cancellation is honoured
    between targets. The folders are validated once before the first item,
    so a bad folder fails the worker without touching anything.
    """

    # Emitted for each target that could not be processed
    item_failed = pyqtSignal(str, str)  # (name, error)

    def __init__(
        self,
        kind: OperationKind,
        targets: Iterable[TransferTarget],
        src_dir: str | Path,
        dst_dir: str | Path | None = None,
        options: Optional[OperationOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent=parent)
        self.kind = kind
        self.targets = list(targets)
        self.src_dir = src_dir
        self.dst_dir = dst_dir
        self.operations = FileOperations(options)

    def do_work(self) -> OperationResult:
        total = len(self.targets)
        result = OperationResult()

        # Validate folders with an empty batch before the first item
        self.operations.run(self.kind, [], self.src_dir, self.dst_dir)

        self.report_status(f"{self.kind.value.capitalize()}: {total} item(s)")

        for i, target in enumerate(self.targets):
            if self.is_cancelled:
                break

            self.report_progress_detail(ProgressInfo(
                current=i,
                total=total,
                message=self.kind.value,
                detail=target.name,
            ))

            item_result = self.operations.run(self.kind, [target], self.src_dir, self.dst_dir)
            for name, error in item_result.failures:
                self.item_failed.emit(name, error)
            result.merge(item_result)

        self.report_progress(result.total, total, str(result))
        return result
