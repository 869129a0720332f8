"""
Bulk file operations between two folders.

Provides batch copy, move and delete with:
- Recursive subtree handling
- Overwrite on name collision
- Per-item failure isolation (a failed item never stops the batch)
- Up-front validation of the folders involved
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from foldercompare.core.errors import InvalidDirectoryError
from foldercompare.core.models import OperationKind, OperationResult, TransferTarget


ITEM_ERRORS = (OSError, shutil.Error)


def _same_entry(source: Path, dest: Path) -> bool:
    """True when both paths name one existing file system entry."""
    try:
        return os.path.samefile(source, dest)
    except OSError:
        return False


def _copy_over(source: str, dest: str, *, copy_function: Callable = shutil.copy) -> str:
    """Copy one file, refusing to write into an existing directory."""
    if os.path.isdir(dest) and not os.path.islink(dest):
        raise IsADirectoryError(f"Destination is a directory: {dest}")
    try:
        return copy_function(source, dest)
    except shutil.SameFileError:
        return dest


def copy_recursive(
    source: Path,
    dest: Path,
    copy_function: Callable = shutil.copy
) -> None:
    """
    Copy a file or a whole directory tree to ``dest``.

    Missing parent directories are created and existing files are
    overwritten. Copying an entry onto itself does nothing.
    """
    if _same_entry(source, dest):
        return

    if source.is_dir():
        shutil.copytree(
            source,
            dest,
            dirs_exist_ok=True,
            copy_function=lambda s, d: _copy_over(s, d, copy_function=copy_function),
        )
    else:
        dest.parent.mkdir(parents=True, exist_ok=True)
        _copy_over(str(source), str(dest), copy_function=copy_function)


def delete_recursive(path: Path) -> None:
    """
    Delete a file or directory tree, children before parents.

    A path that does not exist is left alone.
    """
    if not os.path.lexists(path):
        return

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def move_path(
    source: Path,
    dest: Path,
    atomic: bool = True,
    copy_function: Callable = shutil.copy
) -> None:
    """
    Move a file or directory to ``dest``.

    With ``atomic`` a rename is tried first; if it fails the entry is copied
    and the source removed afterwards. Moving an entry onto itself does
    nothing.
    """
    if _same_entry(source, dest):
        return

    if atomic:
        try:
            os.replace(source, dest)
            return
        except OSError as e:
            logging.debug(f"FileOperations - Rename {source} -> {dest} failed, copying instead: {e}")

    copy_recursive(source, dest, copy_function)
    delete_recursive(source)


@dataclass
class OperationOptions:
    """Options for bulk operations."""
    preserve_timestamps: bool = False


class FileOperations:
    """
    Executes copy, move and delete batches.

    Each batch checks its folders first and raises InvalidDirectoryError
    before touching anything. After that, every target is handled on its
    own and failures are only reported through the returned counts.
    """

    def __init__(self, options: Optional[OperationOptions] = None):
        self.options = options or OperationOptions()

    @property
    def _copy_function(self) -> Callable:
        return shutil.copy2 if self.options.preserve_timestamps else shutil.copy

    def copy(
        self,
        targets: Iterable[TransferTarget],
        src_dir: Path | str,
        dst_dir: Path | str
    ) -> OperationResult:
        """Copy targets from ``src_dir`` into ``dst_dir``, overwriting."""
        src_dir, dst_dir = self._validate_pair(src_dir, dst_dir)

        def copy_one(target: TransferTarget) -> None:
            copy_recursive(src_dir / target.name, dst_dir / target.name, self._copy_function)

        return self._run_batch(OperationKind.COPY, targets, copy_one)

    def move(
        self,
        targets: Iterable[TransferTarget],
        src_dir: Path | str,
        dst_dir: Path | str
    ) -> OperationResult:
        """
        Move targets from ``src_dir`` into ``dst_dir``.

        Files are renamed when possible; directories are always copied and
        then removed from the source.
        """
        src_dir, dst_dir = self._validate_pair(src_dir, dst_dir)

        def move_one(target: TransferTarget) -> None:
            move_path(
                src_dir / target.name,
                dst_dir / target.name,
                atomic=not target.is_directory,
                copy_function=self._copy_function,
            )

        return self._run_batch(OperationKind.MOVE, targets, move_one)

    def delete(
        self,
        targets: Iterable[TransferTarget],
        directory: Path | str
    ) -> OperationResult:
        """Delete targets inside ``directory``. Missing targets count as done."""
        directory = self._validate(directory, "target folder")

        def delete_one(target: TransferTarget) -> None:
            path = directory / target.name
            if target.is_directory:
                delete_recursive(path)
            else:
                path.unlink(missing_ok=True)

        return self._run_batch(OperationKind.DELETE, targets, delete_one)

    def run(
        self,
        kind: OperationKind,
        targets: Iterable[TransferTarget],
        src_dir: Path | str,
        dst_dir: Path | str | None = None
    ) -> OperationResult:
        """Dispatch a batch by kind. ``dst_dir`` is ignored for deletes."""
        if kind == OperationKind.COPY:
            return self.copy(targets, src_dir, dst_dir)
        if kind == OperationKind.MOVE:
            return self.move(targets, src_dir, dst_dir)
        if kind == OperationKind.DELETE:
            return self.delete(targets, src_dir)
        raise ValueError(f"Unknown operation: {kind!r}")

    def _run_batch(
        self,
        kind: OperationKind,
        targets: Iterable[TransferTarget],
        action: Callable[[TransferTarget], None]
    ) -> OperationResult:
        result = OperationResult()

        for target in targets:
            try:
                action(target)
                result.record_success()
            except ITEM_ERRORS as e:
                logging.warning(f"FileOperations - {kind.value} failed for {target.name}: {e}")
                result.record_failure(target.name, str(e))

        logging.info(f"FileOperations - {kind.value}: {result}")
        return result

    def _validate_pair(self, src_dir: Path | str, dst_dir: Path | str) -> tuple[Path, Path]:
        return (
            self._validate(src_dir, "source folder"),
            self._validate(dst_dir, "destination folder"),
        )

    @staticmethod
    def _validate(directory: Path | str | None, role: str) -> Path:
        if directory is None or not str(directory).strip():
            logging.error(f"FileOperations - No {role} given")
            raise InvalidDirectoryError(directory or "", role)

        path = Path(directory).expanduser()
        if not path.is_dir():
            logging.error(f"FileOperations - {role.capitalize()} is not a directory: {path}")
            raise InvalidDirectoryError(path, role)
        return path
