from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

from icerel.core.config import ReleaseConfig
from icerel.core.result import Err, Ok
from icerel.output.console import MockConsole
from icerel.platform.process import ProcessError
from icerel.release import build as build_mod
from icerel.release.build import BuildPlan, CommandStep, CopyStep, plan_build, run_build
from icerel.release.model import Channel, ReleaseCandidate, ReleaseInfo, Version

INFO = ReleaseInfo(version=Version(0, 8, 0, text="0.8.0"), rc=ReleaseCandidate(2, text="2"))


def _plan(channel: Channel, target: str, config: ReleaseConfig | None = None) -> BuildPlan:
    result = plan_build(INFO, channel=channel, target=target, config=config or ReleaseConfig())
    assert isinstance(result, Ok)
    return result.value


def _names(plan: BuildPlan) -> list[str]:
    return [s.name for s in plan.steps]


def test_svn_on_ubuntu_builds_sdist_and_wheels() -> None:
    plan = _plan("svn", "ubuntu-22.04")

    assert plan.package_version == "0.8.0"
    assert plan.builds_sdist is True
    assert plan.bundle_name == "svn-release-candidate-ubuntu-22.04"
    assert _names(plan) == ["Compile source distribution", "Build wheels", "Add source distribution"]


def test_svn_on_macos_builds_wheels_only() -> None:
    plan = _plan("svn", "macos-14")

    assert plan.builds_sdist is False
    assert _names(plan) == ["Build wheels"]


def test_pypi_sets_rc_version_first() -> None:
    plan = _plan("pypi", "ubuntu-22.04")

    assert plan.package_version == "0.8.0rc2"
    first = plan.steps[0]
    assert isinstance(first, CommandStep)
    assert first.argv == ("poetry", "version", "0.8.0rc2")
    assert _names(plan)[1:] == ["Compile source distribution", "Build wheels", "Add source distribution"]


def test_pypi_on_windows() -> None:
    plan = _plan("pypi", "windows-2022")
    assert _names(plan) == ["Set version with RC", "Build wheels"]
    assert plan.bundle_name == "pypi-release-candidate-windows-2022"


def test_wheel_step_carries_cibuildwheel_env() -> None:
    plan = _plan("svn", "macos-15")
    step = plan.steps[-1]

    assert isinstance(step, CommandStep)
    assert step.argv[:3] == ("cibuildwheel", "--output-dir", "wheelhouse")
    env = dict(step.env)
    assert env["CIBW_ARCHS"] == "auto64"
    assert env["CIBW_PROJECT_REQUIRES_PYTHON"] == ">=3.9,<3.13"
    assert env["CIBW_TEST_SKIP"] == "pp* *macosx*"


def test_copy_step_targets_wheelhouse() -> None:
    step = _plan("svn", "ubuntu-22.04").steps[-1]
    assert step == CopyStep(name="Add source distribution", source_dir="dist", dest_dir="wheelhouse")


def test_unknown_target() -> None:
    result = plan_build(INFO, channel="svn", target="freebsd-14", config=ReleaseConfig())

    assert isinstance(result, Err)
    assert "freebsd-14" in result.error.message
    assert result.error.hint is not None
    assert "ubuntu-22.04" in result.error.hint


def test_configured_sdist_runner() -> None:
    config = ReleaseConfig(targets=("windows-2022",), sdist_target_prefix="windows")
    assert _plan("svn", "windows-2022", config).builds_sdist is True


class FakeRunner:
    """Stands in for the build tools, producing the files they would."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[list[str]] = []

    def __call__(
        self, cmd: list[str], cwd: Path, extra_env: Mapping[str, str] | None = None
    ):
        del extra_env
        self.calls.append(cmd)
        if self.fail_on is not None and cmd[0] == self.fail_on:
            return Err(ProcessError(tuple(cmd), 1, "", ""))
        if cmd[:2] == ["poetry", "build"]:
            (cwd / "dist").mkdir(exist_ok=True)
            (cwd / "dist" / "pyiceberg-0.8.0.tar.gz").write_bytes(b"sdist")
        if cmd[0] == "cibuildwheel":
            (cwd / "wheelhouse").mkdir(exist_ok=True)
            (cwd / "wheelhouse" / "pyiceberg-0.8.0-cp312-manylinux.whl").write_bytes(b"wheel")
        return Ok(None)


def test_run_build_collects_wheels_and_sdist(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = FakeRunner()
    monkeypatch.setattr(build_mod, "run_streaming", runner)
    console = MockConsole()

    result = run_build(_plan("svn", "ubuntu-22.04"), project_root=tmp_path, console=console, dry_run=False)

    assert isinstance(result, Ok)
    assert [p.name for p in result.value] == [
        "pyiceberg-0.8.0-cp312-manylinux.whl",
        "pyiceberg-0.8.0.tar.gz",
    ]
    assert [c[0] for c in runner.calls] == ["poetry", "cibuildwheel"]
    assert console.find("2 artifact(s)")


def test_run_build_stops_at_first_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = FakeRunner(fail_on="poetry")
    monkeypatch.setattr(build_mod, "run_streaming", runner)

    result = run_build(_plan("pypi", "macos-13"), project_root=tmp_path, console=MockConsole(), dry_run=False)

    assert isinstance(result, Err)
    assert result.error.message == "Set version with RC failed (exit 1)"
    assert len(runner.calls) == 1


def test_run_build_without_artifacts(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(build_mod, "run_streaming", lambda cmd, cwd, extra_env=None: Ok(None))

    result = run_build(_plan("svn", "macos-13"), project_root=tmp_path, console=MockConsole(), dry_run=False)

    assert isinstance(result, Err)
    assert result.error.message == "build produced no artifacts"


def test_run_build_missing_sdist(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(build_mod, "run_streaming", lambda cmd, cwd, extra_env=None: Ok(None))

    result = run_build(_plan("svn", "ubuntu-22.04"), project_root=tmp_path, console=MockConsole(), dry_run=False)

    assert isinstance(result, Err)
    assert result.error.message == "no source distribution to add"


def test_dry_run_executes_nothing(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = FakeRunner()
    monkeypatch.setattr(build_mod, "run_streaming", runner)
    console = MockConsole()

    result = run_build(_plan("pypi", "ubuntu-22.04"), project_root=tmp_path, console=console, dry_run=True)

    assert result == Ok([])
    assert runner.calls == []
    assert console.find("$ poetry version 0.8.0rc2")
    assert console.find("CIBW_ARCHS=auto64")
    assert not (tmp_path / "wheelhouse").exists()
