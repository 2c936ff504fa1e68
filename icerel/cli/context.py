from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from icerel.core.config import ReleaseConfig, load_project_config
from icerel.core.result import Err
from icerel.output.console import ConsoleProtocol, RichConsole
from icerel.output.errors import print_release_error, release_error_exit_code

PROJECT_ENV = "ICEREL_PROJECT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    config: ReleaseConfig
    console: ConsoleProtocol


def project_root() -> Path:
    """Project directory: ``--project`` (via ICEREL_PROJECT) or the cwd."""
    override = os.environ.get(PROJECT_ENV)
    if override:
        return Path(override)
    return Path.cwd()


def build_context() -> CLIContext:
    console = RichConsole()
    root = project_root()

    config_result = load_project_config(root)
    if isinstance(config_result, Err):
        print_release_error(config_result.error, console)
        raise typer.Exit(code=release_error_exit_code(config_result.error))

    return CLIContext(project_root=root, config=config_result.value, console=console)
