from __future__ import annotations

from pathlib import Path

import pytest
import typer

import icerel.cli.commands.check_version as check_cmd
from icerel.cli.commands.check_version import SourceArg
from icerel.cli.context import CLIContext
from icerel.core.config import ReleaseConfig
from icerel.core.errors import ErrorCode
from icerel.core.result import Ok
from icerel.output.console import MockConsole


def _ctx(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, config: ReleaseConfig | None = None) -> MockConsole:
    console = MockConsole()
    ctx = CLIContext(project_root=tmp_path, config=config or ReleaseConfig(), console=console)
    monkeypatch.setattr(check_cmd, "build_context", lambda: ctx)
    return console


def _declared(monkeypatch: pytest.MonkeyPatch, value: str) -> list[str]:
    sources: list[str] = []

    def fake(*, project_root: Path, source: str):
        del project_root
        sources.append(source)
        return Ok(value)

    monkeypatch.setattr(check_cmd, "declared_version", fake)
    return sources


def test_matching_version_passes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = _ctx(tmp_path, monkeypatch)
    sources = _declared(monkeypatch, "0.8.0")

    check_cmd.check_version(version="0.8.0", source=None)

    assert sources == ["poetry"]
    assert console.find("info: Detected poetry version: 0.8.0")
    assert not console.has_error()


def test_mismatch_is_consistency_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = _ctx(tmp_path, monkeypatch)
    _declared(monkeypatch, "0.8.0")

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check_version(version="0.8.1", source=None)

    assert exc.value.exit_code == int(ErrorCode.CONSISTENCY_ERROR)
    assert console.has_error()


def test_malformed_version_is_user_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ctx(tmp_path, monkeypatch)
    sources = _declared(monkeypatch, "0.8.0")

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check_version(version="0.8", source=None)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert sources == []


def test_source_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ctx(tmp_path, monkeypatch, ReleaseConfig(version_source="pyproject"))
    sources = _declared(monkeypatch, "0.8.0")

    check_cmd.check_version(version="0.8.0", source=None)

    assert sources == ["pyproject"]


def test_pyproject_source_reads_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nversion = "0.9.0"\n', encoding="utf-8")
    console = _ctx(tmp_path, monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check_version(version="0.8.0", source=SourceArg.pyproject)

    assert exc.value.exit_code == int(ErrorCode.CONSISTENCY_ERROR)
    assert console.find("0.9.0")
