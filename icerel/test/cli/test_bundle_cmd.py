from __future__ import annotations

from pathlib import Path

import pytest
import typer

import icerel.cli.commands.bundle as bundle_cmd
from icerel.cli.commands._helpers import ChannelArg
from icerel.cli.context import CLIContext
from icerel.core.config import ReleaseConfig
from icerel.core.errors import ErrorCode
from icerel.output.console import MockConsole


def _ctx(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> MockConsole:
    console = MockConsole()
    ctx = CLIContext(project_root=tmp_path, config=ReleaseConfig(), console=console)
    monkeypatch.setattr(bundle_cmd, "build_context", lambda: ctx)
    return console


def test_bundle_names(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _ctx(tmp_path, monkeypatch)

    bundle_cmd.bundle_name(channel=ChannelArg.svn, version="0.8.0", rc="2", os_name=None)
    bundle_cmd.bundle_name(channel=ChannelArg.pypi, version=None, rc=None, os_name="macos-13")

    assert capsys.readouterr().out.splitlines() == [
        "svn-release-candidate-0.8.0rc2",
        "pypi-release-candidate-macos-13",
    ]


def test_merged_name_needs_version_and_rc(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ctx(tmp_path, monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.bundle_name(channel=ChannelArg.svn, version="0.8.0", rc=None, os_name=None)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_upload_then_merge(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = _ctx(tmp_path, monkeypatch)
    store = tmp_path / "store"
    for os_name in ("ubuntu-22.04", "macos-14"):
        wheel = tmp_path / os_name / f"pyiceberg-{os_name}.whl"
        wheel.parent.mkdir()
        wheel.write_bytes(os_name.encode())
        bundle_cmd.upload(channel=ChannelArg.svn, files=[wheel], os_name=os_name, store=store)

    bundle_cmd.merge(channel=ChannelArg.svn, version="0.8.0", rc="2", store=store, keep=False)

    assert sorted(p.name for p in store.iterdir()) == ["svn-release-candidate-0.8.0rc2"]
    assert sorted(p.name for p in (store / "svn-release-candidate-0.8.0rc2").iterdir()) == [
        "pyiceberg-macos-14.whl",
        "pyiceberg-ubuntu-22.04.whl",
    ]
    assert console.find("OK 2 file(s) in svn-release-candidate-0.8.0rc2")


def test_upload_twice_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ctx(tmp_path, monkeypatch)
    wheel = tmp_path / "a.whl"
    wheel.write_bytes(b"a")
    store = tmp_path / "store"
    bundle_cmd.upload(channel=ChannelArg.pypi, files=[wheel], os_name="macos-15", store=store)

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.upload(channel=ChannelArg.pypi, files=[wheel], os_name="macos-15", store=store)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)


def test_merge_with_nothing_to_merge(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ctx(tmp_path, monkeypatch)

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.merge(channel=ChannelArg.pypi, version="0.8.0", rc="2", store=tmp_path, keep=False)

    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
