"""workflow / plan: inspect and render the release-candidate job graph."""

from __future__ import annotations

from pathlib import Path

import typer

from icerel.cli.commands._helpers import exit_on_error
from icerel.cli.context import build_context
from icerel.core.result import Err, Ok, Result
from icerel.output.console import Style
from icerel.platform.files import atomic_write_text
from icerel.release.bundles import merged_bundle_name, platform_bundle_name
from icerel.release.errors import OutputError
from icerel.release.model import CHANNELS, TagTriggered
from icerel.release.validate import validate_trigger
from icerel.release.workflow import release_workflow, render_workflow, topological_order


def workflow(
    out: Path | None = typer.Option(
        None, "--out", help="Write the workflow file here instead of stdout", show_default=False
    ),
) -> None:
    """Render the GitHub Actions workflow for release candidates."""
    ctx = build_context()
    text = exit_on_error(render_workflow(ctx.config), ctx)

    if out is None:
        typer.echo(text, nl=False)
        return

    exit_on_error(_write(out, text), ctx)
    ctx.console.success(f"wrote {out}")


def plan(
    tag: str = typer.Argument(..., help="Release-candidate tag, e.g. pyiceberg-0.8.0rc2"),
) -> None:
    """Show job order, VERSION/RC and every bundle name a tag would produce."""
    ctx = build_context()
    console = ctx.console

    info = exit_on_error(validate_trigger(TagTriggered(tag=tag), prefix=ctx.config.tag_prefix), ctx)
    order = exit_on_error(topological_order(release_workflow(ctx.config)), ctx)

    console.header(f"Release candidate {info.tag(ctx.config.tag_prefix)}")

    console.header("Outputs")
    console.print(f"VERSION={info.version}")
    console.print(f"RC={info.rc}")

    console.header("Jobs")
    for i, job_id in enumerate(order, start=1):
        console.print(f"{i}. {job_id}")

    console.header("Bundles")
    for channel in CHANNELS:
        for target in ctx.config.targets:
            console.print(platform_bundle_name(channel, target), Style.DIM)
        console.print(merged_bundle_name(channel, info), Style.SUCCESS)


def _write(path: Path, text: str) -> Result[None, OutputError]:
    try:
        atomic_write_text(path, text)
    except OSError as e:
        return Err(OutputError(message=f"failed to write workflow: {e}", path=path))
    return Ok(None)
