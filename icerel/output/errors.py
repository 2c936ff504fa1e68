"""Error presentation for release failures.

One place decides how each failure kind is printed and which exit code it
maps to, so every command reports errors the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from icerel.core.config import ConfigError
from icerel.core.errors import ErrorCode
from icerel.output.console import Style
from icerel.release.errors import (
    BuildError,
    BundleError,
    ConsistencyError,
    MetadataError,
    OutputError,
    ParseError,
    TriggerError,
    ValidationError,
    WorkflowError,
)

if TYPE_CHECKING:
    from icerel.output.console import ConsoleProtocol

__all__ = ["AnyReleaseError", "print_release_error", "release_error_exit_code"]

AnyReleaseError = (
    ParseError
    | ValidationError
    | ConsistencyError
    | TriggerError
    | MetadataError
    | BuildError
    | BundleError
    | OutputError
    | WorkflowError
    | ConfigError
)


def print_release_error(error: AnyReleaseError, console: ConsoleProtocol) -> None:
    match error:
        case ConfigError(message=message, path=path):
            console.error(message)
            if path is not None:
                console.print(f"hint: {path}", Style.DIM)
        case _:
            console.error(error.message)
            if error.hint:
                console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: AnyReleaseError) -> int:
    match error:
        case ParseError() | ValidationError() | TriggerError():
            return int(ErrorCode.USER_ERROR)
        case ConsistencyError() | MetadataError():
            return int(ErrorCode.CONSISTENCY_ERROR)
        case BuildError():
            return int(ErrorCode.BUILD_ERROR)
        case BundleError() | OutputError() | ConfigError():
            return int(ErrorCode.IO_ERROR)
        case WorkflowError():
            return int(ErrorCode.USER_ERROR)
