"""Tests for icerel.platform.files module."""

from __future__ import annotations

import hashlib
from pathlib import Path

from icerel.platform.files import append_text, atomic_write_text, copy_files, sha256_file


def test_atomic_write_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / ".github" / "workflows" / "python-release.yml"
    atomic_write_text(path, "name: x\n")
    assert path.read_text(encoding="utf-8") == "name: x\n"
    assert [p.name for p in path.parent.iterdir()] == ["python-release.yml"]


def test_append_text_keeps_existing_lines(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    path.write_text("OTHER=1\n", encoding="utf-8")

    append_text(path, "VERSION=0.8.0\n")

    assert path.read_text(encoding="utf-8") == "OTHER=1\nVERSION=0.8.0\n"


def test_copy_files_is_flat(tmp_path: Path) -> None:
    src = tmp_path / "dist"
    src.mkdir()
    (src / "pyiceberg-0.8.0.tar.gz").write_bytes(b"sdist")

    copied = copy_files([src / "pyiceberg-0.8.0.tar.gz"], tmp_path / "wheelhouse")

    assert copied == [tmp_path / "wheelhouse" / "pyiceberg-0.8.0.tar.gz"]
    assert copied[0].read_bytes() == b"sdist"


def test_sha256_file(tmp_path: Path) -> None:
    path = tmp_path / "a.whl"
    path.write_bytes(b"wheel")
    assert sha256_file(path) == hashlib.sha256(b"wheel").hexdigest()
