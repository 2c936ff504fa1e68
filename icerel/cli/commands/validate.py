"""validate: turn a tag push or manual dispatch into VERSION and RC."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import typer

from icerel.cli.commands._helpers import exit_on_error, exit_with_code
from icerel.cli.context import build_context
from icerel.core.errors import ErrorCode
from icerel.output.console import Style
from icerel.release.model import ManualTriggered, TagTriggered, Trigger
from icerel.release.outputs import write_outputs
from icerel.release.trigger import resolve_trigger
from icerel.release.validate import validate_trigger


def validate(
    tag: str | None = typer.Option(
        None, "--tag", help="Tag to parse, e.g. pyiceberg-0.8.0rc2", show_default=False
    ),
    version: str | None = typer.Option(
        None, "--version", help="Version input, e.g. 0.8.0", show_default=False
    ),
    rc: str | None = typer.Option(None, "--rc", help="Release candidate number", show_default=False),
    output: Path | None = typer.Option(
        None,
        "--output",
        help="File to append VERSION/RC to (default: $GITHUB_OUTPUT, else stdout)",
        show_default=False,
    ),
) -> None:
    """Validate the release tag or manual inputs and export VERSION and RC."""
    ctx = build_context()
    console = ctx.console

    trigger: Trigger
    if tag is not None:
        if version is not None or rc is not None:
            console.error("--tag cannot be combined with --version/--rc")
            exit_with_code(ErrorCode.USER_ERROR)
        trigger = TagTriggered(tag=tag)
    elif version is not None or rc is not None:
        if version is None or rc is None:
            console.error("--version and --rc must be given together")
            exit_with_code(ErrorCode.USER_ERROR)
        trigger = ManualTriggered(version=version, rc=rc)
    else:
        trigger = exit_on_error(resolve_trigger(os.environ), ctx)

    match trigger:
        case TagTriggered(tag=t):
            console.info(f"Workflow triggered by tag push ({t}).")
        case ManualTriggered():
            console.info("Workflow triggered manually via workflow_dispatch.")

    info = exit_on_error(validate_trigger(trigger, prefix=ctx.config.tag_prefix), ctx)

    if output is None:
        env_output = os.environ.get("GITHUB_OUTPUT")
        output = Path(env_output) if env_output else None

    exit_on_error(write_outputs(info, path=output, stream=sys.stdout), ctx)

    console.print(f"Using Version: {info.version}", Style.DIM)
    console.print(f"Using RC: {info.rc}", Style.DIM)
    console.success(f"release candidate {info.rc_version}")
