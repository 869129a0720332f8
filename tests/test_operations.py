from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from foldercompare.core.errors import InvalidDirectoryError
from foldercompare.core.folder.comparer import FolderComparer
from foldercompare.core.folder.operations import (
    FileOperations,
    OperationOptions,
    copy_recursive,
    delete_recursive,
)
from foldercompare.core.models import OperationKind, RowStatus, TransferTarget
from tests.helpers import FIXED_MTIME, write_file


def file_target(name: str) -> TransferTarget:
    return TransferTarget(name=name, is_directory=False)


def dir_target(name: str) -> TransferTarget:
    return TransferTarget(name=name, is_directory=True)


class OperationTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.left = self.root / "left"
        self.right = self.root / "right"
        self.left.mkdir()
        self.right.mkdir()
        self.ops = FileOperations()

    def tearDown(self) -> None:
        self._tmp.cleanup()


class CopyTests(OperationTestCase):
    def test_copy_overwrites_existing_file(self) -> None:
        write_file(self.left / "a.txt", "left content")
        write_file(self.right / "a.txt", "old right content, longer")

        result = self.ops.copy([file_target("a.txt")], self.left, self.right)

        self.assertEqual(tuple(result), (1, 0))
        self.assertEqual((self.right / "a.txt").read_bytes(), b"left content")
        self.assertTrue((self.left / "a.txt").exists())

    def test_copy_gets_fresh_modification_time(self) -> None:
        write_file(self.left / "a.txt", "x", mtime=FIXED_MTIME)
        self.ops.copy([file_target("a.txt")], self.left, self.right)
        self.assertNotEqual(int((self.right / "a.txt").stat().st_mtime), FIXED_MTIME)

    def test_copy_with_timestamps_option(self) -> None:
        write_file(self.left / "a.txt", "x", mtime=FIXED_MTIME)
        ops = FileOperations(OperationOptions(preserve_timestamps=True))
        ops.copy([file_target("a.txt")], self.left, self.right)
        self.assertEqual(int((self.right / "a.txt").stat().st_mtime), FIXED_MTIME)

    def test_copied_file_still_classifies_as_different(self) -> None:
        write_file(self.left / "a.txt", "abc", mtime=FIXED_MTIME)
        write_file(self.right / "a.txt", "xyz", mtime=FIXED_MTIME + 100_000_000)

        self.ops.copy([file_target("a.txt")], self.left, self.right)
        row = FolderComparer().compare(self.left, self.right).find("a.txt")

        self.assertEqual((self.right / "a.txt").read_text(), "abc")
        self.assertEqual(row.status, RowStatus.DIFFERENT)

    def test_copy_into_same_folder_is_noop(self) -> None:
        write_file(self.left / "a.txt", "a")
        write_file(self.left / "docs" / "x.md", "x")

        result = self.ops.copy([file_target("a.txt"), dir_target("docs")], self.left, self.left)

        self.assertEqual(tuple(result), (2, 0))
        self.assertEqual((self.left / "a.txt").read_text(), "a")
        self.assertEqual((self.left / "docs" / "x.md").read_text(), "x")

    def test_copy_directory_recreates_subtree_and_merges(self) -> None:
        write_file(self.left / "docs" / "readme.md", "new readme")
        write_file(self.left / "docs" / "img" / "logo.png", b"\x89PNG")
        write_file(self.left / "docs" / "img" / "deep" / "x.bin", b"\x01\x02")
        write_file(self.right / "docs" / "readme.md", "old readme")
        write_file(self.right / "docs" / "keep.txt", "untouched")

        result = self.ops.copy([dir_target("docs")], self.left, self.right)

        self.assertEqual(tuple(result), (1, 0))
        self.assertEqual((self.right / "docs" / "readme.md").read_text(), "new readme")
        self.assertEqual((self.right / "docs" / "img" / "logo.png").read_bytes(), b"\x89PNG")
        self.assertEqual((self.right / "docs" / "img" / "deep" / "x.bin").read_bytes(), b"\x01\x02")
        self.assertEqual((self.right / "docs" / "keep.txt").read_text(), "untouched")

    def test_failed_item_does_not_stop_batch(self) -> None:
        write_file(self.left / "a.txt", "a")
        write_file(self.left / "c.txt", "c")

        result = self.ops.copy(
            [file_target("a.txt"), file_target("missing.txt"), file_target("c.txt")],
            self.left,
            self.right,
        )

        self.assertEqual(tuple(result), (2, 1))
        self.assertEqual(result.failures[0][0], "missing.txt")
        self.assertTrue((self.right / "a.txt").exists())
        self.assertTrue((self.right / "c.txt").exists())

    def test_copy_file_onto_directory_fails(self) -> None:
        write_file(self.left / "thing", "file")
        (self.right / "thing").mkdir()

        result = self.ops.copy([file_target("thing")], self.left, self.right)

        self.assertEqual(tuple(result), (0, 1))
        self.assertTrue((self.right / "thing").is_dir())

    def test_missing_destination_rejects_whole_batch(self) -> None:
        write_file(self.left / "a.txt", "a")

        with self.assertRaises(InvalidDirectoryError):
            self.ops.copy([file_target("a.txt")], self.left, self.root / "nowhere")

        self.assertFalse((self.root / "nowhere").exists())

    def test_blank_source_rejects_whole_batch(self) -> None:
        with self.assertRaises(NotADirectoryError):
            self.ops.copy([file_target("a.txt")], "", self.right)

    def test_copy_recursive_creates_parents(self) -> None:
        source = write_file(self.left / "a.txt", "a")
        dest = self.right / "x" / "y" / "a.txt"
        copy_recursive(source, dest)
        self.assertEqual(dest.read_text(), "a")


class MoveTests(OperationTestCase):
    def test_move_file_renames(self) -> None:
        write_file(self.left / "a.txt", "payload")

        result = self.ops.move([file_target("a.txt")], self.left, self.right)

        self.assertEqual(tuple(result), (1, 0))
        self.assertFalse((self.left / "a.txt").exists())
        self.assertEqual((self.right / "a.txt").read_bytes(), b"payload")

    def test_move_file_falls_back_to_copy_and_delete(self) -> None:
        write_file(self.left / "a.txt", "payload")
        write_file(self.right / "a.txt", "old")

        cross_device = OSError(errno.EXDEV, "Invalid cross-device link")
        with mock.patch(
            "foldercompare.core.folder.operations.os.replace",
            side_effect=cross_device,
        ) as replace:
            result = self.ops.move([file_target("a.txt")], self.left, self.right)

        replace.assert_called_once()
        self.assertEqual(tuple(result), (1, 0))
        self.assertFalse((self.left / "a.txt").exists())
        self.assertEqual((self.right / "a.txt").read_bytes(), b"payload")

    def test_move_directory_copies_then_deletes(self) -> None:
        write_file(self.left / "pkg" / "a.py", "a")
        write_file(self.left / "pkg" / "sub" / "b.py", "b")
        write_file(self.right / "pkg" / "existing.py", "stays")

        with mock.patch("foldercompare.core.folder.operations.os.replace") as replace:
            result = self.ops.move([dir_target("pkg")], self.left, self.right)

        replace.assert_not_called()
        self.assertEqual(tuple(result), (1, 0))
        self.assertFalse((self.left / "pkg").exists())
        self.assertEqual((self.right / "pkg" / "a.py").read_text(), "a")
        self.assertEqual((self.right / "pkg" / "sub" / "b.py").read_text(), "b")
        self.assertEqual((self.right / "pkg" / "existing.py").read_text(), "stays")

    def test_failed_copy_keeps_source(self) -> None:
        write_file(self.left / "thing", "file")
        (self.right / "thing").mkdir()

        result = self.ops.move([file_target("thing")], self.left, self.right)

        self.assertEqual(tuple(result), (0, 1))
        self.assertEqual((self.left / "thing").read_text(), "file")

    def test_move_directory_into_same_folder_keeps_it(self) -> None:
        write_file(self.left / "pkg" / "a.py", "a")

        result = self.ops.move([dir_target("pkg")], self.left, self.left)

        self.assertEqual(tuple(result), (1, 0))
        self.assertEqual((self.left / "pkg" / "a.py").read_text(), "a")

    def test_missing_source_rejects_whole_batch(self) -> None:
        with self.assertRaises(InvalidDirectoryError):
            self.ops.move([file_target("a.txt")], self.root / "gone", self.right)


class DeleteTests(OperationTestCase):
    def test_delete_directory_tree(self) -> None:
        write_file(self.right / "tree" / "a.txt", "a")
        write_file(self.right / "tree" / "b" / "c" / "d.txt", "d")
        write_file(self.right / "other.txt", "keep")

        result = self.ops.delete([dir_target("tree")], self.right)

        self.assertEqual(tuple(result), (1, 0))
        self.assertFalse((self.right / "tree").exists())
        self.assertTrue((self.right / "other.txt").exists())

    def test_delete_file(self) -> None:
        write_file(self.right / "a.txt", "a")
        result = self.ops.delete([file_target("a.txt")], self.right)
        self.assertEqual(tuple(result), (1, 0))
        self.assertFalse((self.right / "a.txt").exists())

    def test_delete_missing_target_is_success(self) -> None:
        result = self.ops.delete([file_target("ghost.txt"), dir_target("ghost-dir")], self.right)
        self.assertEqual(tuple(result), (2, 0))

    def test_delete_is_idempotent(self) -> None:
        write_file(self.right / "a.txt", "a")
        first = self.ops.delete([file_target("a.txt")], self.right)
        second = self.ops.delete([file_target("a.txt")], self.right)
        self.assertEqual(tuple(first), (1, 0))
        self.assertEqual(tuple(second), (1, 0))

    def test_invalid_folder_rejects_batch(self) -> None:
        path = write_file(self.root / "file.txt", "x")
        with self.assertRaises(InvalidDirectoryError) as ctx:
            self.ops.delete([file_target("a")], path)
        self.assertEqual(ctx.exception.role, "target folder")
        self.assertTrue(path.exists())

    def test_delete_recursive_ignores_missing_path(self) -> None:
        delete_recursive(self.root / "not-there")

    def test_delete_recursive_removes_symlink_not_target(self) -> None:
        write_file(self.left / "real" / "file.txt", "keep me")
        link = self.right / "link"
        try:
            os.symlink(self.left / "real", link, target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("symlinks not supported")

        delete_recursive(link)

        self.assertFalse(os.path.lexists(link))
        self.assertTrue((self.left / "real" / "file.txt").exists())


class RunDispatchTests(OperationTestCase):
    def test_run_dispatches_by_kind(self) -> None:
        write_file(self.left / "a.txt", "a")

        self.ops.run(OperationKind.COPY, [file_target("a.txt")], self.left, self.right)
        self.assertTrue((self.right / "a.txt").exists())

        self.ops.run(OperationKind.DELETE, [file_target("a.txt")], self.right)
        self.assertFalse((self.right / "a.txt").exists())

        self.ops.run(OperationKind.MOVE, [file_target("a.txt")], self.left, self.right)
        self.assertFalse((self.left / "a.txt").exists())
        self.assertTrue((self.right / "a.txt").exists())


if __name__ == "__main__":
    unittest.main()
