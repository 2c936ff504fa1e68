"""Per-channel, per-platform release-candidate builds.

A build is planned first (pure, testable) and then executed step by step.
The ``pypi`` channel stamps the rc-qualified version into the project before
building; the ``svn`` channel builds the repository version as-is. Only the
designated sdist runner produces a source distribution. Every wheel is
smoke-tested by cibuildwheel with the configured test command.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from icerel.core.config import ReleaseConfig
from icerel.core.result import Err, Ok, Result
from icerel.output.console import ConsoleProtocol, Style
from icerel.platform.files import copy_files
from icerel.platform.process import run_streaming
from icerel.release.bundles import platform_bundle_name
from icerel.release.errors import BuildError
from icerel.release.model import Channel, ReleaseInfo


@dataclass(frozen=True, slots=True)
class CommandStep:
    name: str
    argv: tuple[str, ...]
    env: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class CopyStep:
    """Copy every file of ``source_dir`` into ``dest_dir`` (both project-relative)."""

    name: str
    source_dir: str
    dest_dir: str


BuildStep = CommandStep | CopyStep


@dataclass(frozen=True, slots=True)
class BuildPlan:
    channel: Channel
    target: str
    package_version: str
    builds_sdist: bool
    wheelhouse: str
    bundle_name: str
    steps: tuple[BuildStep, ...]


def plan_build(
    info: ReleaseInfo,
    *,
    channel: Channel,
    target: str,
    config: ReleaseConfig,
) -> Result[BuildPlan, BuildError]:
    if target not in config.targets:
        return Err(
            BuildError(
                message=f"unknown build target: {target}",
                hint=f"Configured targets: {', '.join(config.targets)}",
            )
        )

    sdist = config.builds_sdist(target)
    steps: list[BuildStep] = []

    if channel == "pypi":
        package_version = info.rc_version
        steps.append(
            CommandStep(
                name="Set version with RC",
                argv=("poetry", "version", package_version),
            )
        )
    else:
        package_version = str(info.version)

    if sdist:
        steps.append(
            CommandStep(
                name="Compile source distribution",
                argv=("poetry", "build", "--format=sdist"),
            )
        )

    steps.append(
        CommandStep(
            name="Build wheels",
            argv=(
                "cibuildwheel",
                "--output-dir",
                config.wheelhouse,
                "--config-file",
                "pyproject.toml",
            ),
            env=tuple(config.cibuildwheel.env().items()),
        )
    )

    if sdist:
        steps.append(
            CopyStep(
                name="Add source distribution",
                source_dir=config.dist_dir,
                dest_dir=config.wheelhouse,
            )
        )

    return Ok(
        BuildPlan(
            channel=channel,
            target=target,
            package_version=package_version,
            builds_sdist=sdist,
            wheelhouse=config.wheelhouse,
            bundle_name=platform_bundle_name(channel, target),
            steps=tuple(steps),
        )
    )


def run_build(
    plan: BuildPlan,
    *,
    project_root: Path,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[list[Path], BuildError]:
    """Execute ``plan`` in order, stopping at the first failing step.

    Returns the files left in the wheelhouse (empty in dry-run).
    """
    console.header(f"Build {plan.channel} artifacts on {plan.target} ({plan.package_version})")

    for step in plan.steps:
        console.print(step.name, Style.INFO)
        match step:
            case CommandStep(argv=argv, env=env):
                for key, value in env:
                    console.print(f"{key}={value}", Style.DIM)
                console.command(list(argv))
                if dry_run:
                    continue
                result = run_streaming(list(argv), cwd=project_root, extra_env=dict(env))
                if isinstance(result, Err):
                    e = result.error
                    return Err(
                        BuildError(
                            message=f"{step.name} failed (exit {e.returncode})",
                            hint=e.stderr.strip() or " ".join(argv),
                        )
                    )
            case CopyStep(source_dir=source_dir, dest_dir=dest_dir):
                console.print(f"copy {source_dir}/* -> {dest_dir}/", Style.DIM)
                if dry_run:
                    continue
                copied = _copy_step(project_root / source_dir, project_root / dest_dir)
                if isinstance(copied, Err):
                    return copied
                for path in copied.value:
                    console.print(f"  {path.name}", Style.DIM)

    if dry_run:
        console.success("dry-run: no commands executed")
        return Ok([])

    wheelhouse = project_root / plan.wheelhouse
    files = sorted(p for p in wheelhouse.glob("*") if p.is_file()) if wheelhouse.is_dir() else []
    if not files:
        return Err(BuildError(message="build produced no artifacts", hint=str(wheelhouse)))

    console.success(f"{len(files)} artifact(s) in {plan.wheelhouse}/")
    return Ok(files)


def _copy_step(source: Path, dest: Path) -> Result[list[Path], BuildError]:
    files = sorted(p for p in source.glob("*") if p.is_file()) if source.is_dir() else []
    if not files:
        return Err(BuildError(message="no source distribution to add", hint=str(source)))
    try:
        return Ok(copy_files(files, dest))
    except OSError as e:
        return Err(BuildError(message=f"failed to copy source distribution: {e}", hint=str(dest)))
