"""Bundle commands: naming, per-platform upload, per-channel merge."""

from __future__ import annotations

from pathlib import Path

import typer

from icerel.cli.commands._helpers import (
    ChannelArg,
    exit_on_error,
    exit_with_code,
    release_info,
)
from icerel.cli.context import build_context
from icerel.core.errors import ErrorCode
from icerel.output.console import Style
from icerel.release.bundles import (
    merge_bundles,
    merged_bundle_name,
    platform_bundle_name,
    upload_bundle,
)


def bundle_name(
    channel: ChannelArg = typer.Argument(..., help="svn or pypi"),
    version: str | None = typer.Option(None, "--version", help="Validated VERSION"),
    rc: str | None = typer.Option(None, "--rc", help="Validated RC"),
    os_name: str | None = typer.Option(
        None, "--os", help="Print the per-platform name instead", show_default=False
    ),
) -> None:
    """Print a bundle name to stdout."""
    ctx = build_context()
    if os_name is not None:
        typer.echo(platform_bundle_name(channel.as_channel(), os_name))
        return

    if version is None or rc is None:
        ctx.console.error("--version and --rc are required for the merged bundle name")
        exit_with_code(ErrorCode.USER_ERROR)
    info = release_info(ctx, version=version, rc=rc)
    typer.echo(merged_bundle_name(channel.as_channel(), info))


def upload(
    channel: ChannelArg = typer.Argument(..., help="svn or pypi"),
    files: list[Path] = typer.Argument(..., help="Files to place in the bundle"),
    os_name: str = typer.Option(..., "--os", help="Runner label the files were built on"),
    store: Path = typer.Option(..., "--store", help="Bundle store directory"),
) -> None:
    """Upload build output as the per-platform bundle."""
    ctx = build_context()
    name = platform_bundle_name(channel.as_channel(), os_name)
    path = exit_on_error(upload_bundle(store, name, files), ctx)
    ctx.console.success(f"uploaded {len(files)} file(s) as {name}")
    ctx.console.print(str(path), Style.DIM)


def merge(
    channel: ChannelArg = typer.Argument(..., help="svn or pypi"),
    version: str = typer.Option(..., "--version", help="Validated VERSION"),
    rc: str = typer.Option(..., "--rc", help="Validated RC"),
    store: Path = typer.Option(..., "--store", help="Bundle store directory"),
    keep: bool = typer.Option(False, "--keep", help="Keep per-platform bundles after merging"),
) -> None:
    """Merge every per-platform bundle of a channel into the release-candidate bundle."""
    ctx = build_context()
    info = release_info(ctx, version=version, rc=rc)

    result = exit_on_error(
        merge_bundles(store, channel=channel.as_channel(), info=info, delete_merged=not keep),
        ctx,
    )

    ctx.console.header(result.name)
    for name in result.merged:
        suffix = " (deleted)" if result.deleted else ""
        ctx.console.print(f"merged {name}{suffix}", Style.DIM)
    for rel in result.files:
        ctx.console.print(f"  {rel}")
    ctx.console.success(f"{len(result.files)} file(s) in {result.name}")
