"""Filesystem helpers."""

from __future__ import annotations

import hashlib
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

__all__ = ["append_text", "atomic_write_text", "copy_files", "sha256_file"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def append_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Append to a file the runner also writes to (e.g. ``$GITHUB_OUTPUT``)."""
    with path.open("a", encoding=encoding, newline="\n") as handle:
        handle.write(content)


def copy_files(files: Iterable[Path], dest_dir: Path) -> list[Path]:
    """Copy regular files flat into ``dest_dir``; returns the new paths."""
    dest_dir.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for src in files:
        target = dest_dir / src.name
        shutil.copy2(src, target)
        copied.append(target)
    return copied


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
