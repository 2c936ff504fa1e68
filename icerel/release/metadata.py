"""Declared project version accessors.

``poetry`` asks the package manager (``poetry version --short``), which is
the authoritative source in CI. ``pyproject`` reads the same value straight
from ``pyproject.toml`` for environments without Poetry.
"""

from __future__ import annotations

from pathlib import Path

from icerel.core.config import VersionSource, read_pyproject
from icerel.core.result import Err, Ok, Result
from icerel.core.structured import get_str, get_table
from icerel.platform.process import run as run_process
from icerel.release.errors import MetadataError

POETRY_TIMEOUT_SECONDS = 120.0


def declared_version(
    *, project_root: Path, source: VersionSource
) -> Result[str, MetadataError]:
    match source:
        case "poetry":
            return poetry_version(project_root=project_root)
        case "pyproject":
            return pyproject_version(project_root=project_root)


def poetry_version(*, project_root: Path) -> Result[str, MetadataError]:
    result = run_process(
        ["poetry", "version", "--short"],
        cwd=project_root,
        timeout=POETRY_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        e = result.error
        return Err(
            MetadataError(
                message=f"failed to read version from Poetry: {e}",
                hint=e.stderr.strip() or "Install Poetry or use --source pyproject",
            )
        )

    # Poetry may print warnings before the version; the value is the last line.
    lines = [line.strip() for line in result.value.splitlines() if line.strip()]
    if not lines:
        return Err(MetadataError(message="poetry version --short printed nothing"))
    return Ok(lines[-1])


def pyproject_version(*, project_root: Path) -> Result[str, MetadataError]:
    path = project_root / "pyproject.toml"
    data = read_pyproject(path)
    if isinstance(data, Err):
        return Err(MetadataError(message=data.error.message, hint=str(path)))

    tool = get_table(data.value, "tool") or {}
    for table in (get_table(tool, "poetry"), get_table(data.value, "project")):
        if table is None:
            continue
        value = get_str(table, "version")
        if value is not None:
            return Ok(value)

    return Err(
        MetadataError(
            message="no version declared in pyproject.toml",
            hint="Expected [tool.poetry].version or [project].version",
        )
    )
