from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


FIXED_MTIME = 1_600_000_000  # 2020-09-13


def write_file(path: Path, content: bytes | str, mtime: Optional[float] = FIXED_MTIME) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def case_sensitive_fs(directory: Path) -> bool:
    marker = directory / "CaseMarker"
    marker.write_text("x", encoding="utf-8")
    try:
        return not (directory / "casemarker").exists()
    finally:
        marker.unlink()


def can_symlink(directory: Path) -> bool:
    try:
        os.symlink(directory / "missing-target", directory / "symlink-check")
    except (OSError, NotImplementedError):
        return False
    os.unlink(directory / "symlink-check")
    return True
