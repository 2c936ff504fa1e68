"""check-version: hard gate on the declared project version."""

from __future__ import annotations

from enum import StrEnum

import typer

from icerel.cli.commands._helpers import exit_on_error, exit_with_code
from icerel.cli.context import build_context
from icerel.core.config import VersionSource
from icerel.core.errors import ErrorCode
from icerel.release.consistency import check_version_consistency
from icerel.release.metadata import declared_version
from icerel.release.validate import VERSION_FORMAT, parse_version


class SourceArg(StrEnum):
    poetry = "poetry"
    pyproject = "pyproject"

    def as_source(self) -> VersionSource:
        return "poetry" if self is SourceArg.poetry else "pyproject"


def check_version(
    version: str = typer.Option(..., "--version", help="Validated VERSION, e.g. 0.8.0"),
    source: SourceArg | None = typer.Option(
        None,
        "--source",
        help="Where to read the declared version (default: config, else poetry)",
        show_default=False,
    ),
) -> None:
    """Fail unless VERSION equals the project's declared version."""
    ctx = build_context()
    console = ctx.console

    parsed = parse_version(version)
    if parsed is None:
        console.error(f"version ({version}) must be in the format: {VERSION_FORMAT}")
        exit_with_code(ErrorCode.USER_ERROR)

    resolved = source.as_source() if source is not None else ctx.config.version_source
    declared = exit_on_error(
        declared_version(project_root=ctx.project_root, source=resolved), ctx
    )
    console.info(f"Detected {resolved} version: {declared}")

    exit_on_error(check_version_consistency(parsed, declared), ctx)
    console.success(f"version {version} matches the project version")
