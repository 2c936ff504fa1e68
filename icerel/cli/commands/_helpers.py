"""Shared helpers for CLI commands."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from icerel.core.errors import ErrorCode
from icerel.core.result import Err, Result
from icerel.output.errors import AnyReleaseError, print_release_error, release_error_exit_code
from icerel.release.model import Channel
from icerel.release.validate import validate_inputs

if TYPE_CHECKING:
    from icerel.cli.context import CLIContext
    from icerel.release.model import ReleaseInfo


T = TypeVar("T")


class ChannelArg(StrEnum):
    svn = "svn"
    pypi = "pypi"

    def as_channel(self) -> Channel:
        return "svn" if self is ChannelArg.svn else "pypi"


def exit_on_error(result: Result[T, AnyReleaseError], ctx: CLIContext) -> T:
    """Return the value of ``result`` or print its error and exit.

    Replaces the pattern:
        if isinstance(result, Err):
            print_release_error(result.error, ctx.console)
            raise typer.Exit(code=release_error_exit_code(result.error))
        value = result.value
    """
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))
    return result.value


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))


def release_info(ctx: CLIContext, *, version: str, rc: str) -> ReleaseInfo:
    """Validate ``--version``/``--rc`` options into the run's release info."""
    return exit_on_error(validate_inputs(version, rc), ctx)
