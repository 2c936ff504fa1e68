from __future__ import annotations

import os
from pathlib import Path

import typer

from icerel import __version__
from icerel.cli.commands.build import build
from icerel.cli.commands.bundle import bundle_name, merge, upload
from icerel.cli.commands.check_version import check_version
from icerel.cli.commands.validate import validate
from icerel.cli.commands.workflow import plan, workflow
from icerel.cli.context import PROJECT_ENV
from icerel.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Validate, build and bundle PyIceberg release candidates.",
)


# Validation gates
app.command()(validate)
app.command("check-version")(check_version)

# Builds and bundles
app.command()(build)
app.command()(upload)
app.command()(merge)
app.command("bundle-name")(bundle_name)

# Job graph
app.command()(plan)
app.command()(workflow)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project root holding pyproject.toml (default: current directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --project '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[PROJECT_ENV] = str(root)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def main() -> None:
    app()
