"""build: produce one platform's artifacts for one channel."""

from __future__ import annotations

import typer

from icerel.cli.commands._helpers import ChannelArg, exit_on_error, release_info
from icerel.cli.context import build_context
from icerel.output.console import Style
from icerel.release.build import plan_build, run_build


def build(
    channel: ChannelArg = typer.Argument(..., help="svn or pypi"),
    os_name: str = typer.Option(..., "--os", help="Runner label, e.g. ubuntu-22.04"),
    version: str = typer.Option(..., "--version", help="Validated VERSION"),
    rc: str = typer.Option(..., "--rc", help="Validated RC"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands without running them"),
) -> None:
    """Build the sdist (designated runner only) and smoke-tested wheels."""
    ctx = build_context()
    info = release_info(ctx, version=version, rc=rc)

    plan = exit_on_error(
        plan_build(info, channel=channel.as_channel(), target=os_name, config=ctx.config),
        ctx,
    )
    files = exit_on_error(
        run_build(plan, project_root=ctx.project_root, console=ctx.console, dry_run=dry_run),
        ctx,
    )

    for path in files:
        ctx.console.print(path.name, Style.DIM)
    ctx.console.info(f"upload as bundle: {plan.bundle_name}")
