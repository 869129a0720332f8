"""
Background workers for non-blocking operations.

Provides QThread-based workers for:
- Folder comparison
- Bulk copy, move and delete

All workers use Qt signals for thread-safe communication
with the calling thread.
"""

from foldercompare.workers.base_worker import (
    BaseWorker,
    ProgressInfo,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from foldercompare.workers.compare_worker import (
    FolderCompareWorker,
)
from foldercompare.workers.operation_worker import (
    FileOperationWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'ProgressInfo',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Compare
    'FolderCompareWorker',
    # Operations
    'FileOperationWorker',
]
