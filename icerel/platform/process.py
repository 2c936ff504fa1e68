"""Subprocess execution with Result-based error handling.

Wraps ``subprocess.run`` for the external tools a release run drives
(``poetry``, ``cibuildwheel``) and returns structured errors instead of
raising.

Usage:
    result = run(["poetry", "version", "--short"], cwd=project_root)
    match result:
        case Ok(stdout):
            print(stdout.strip())
        case Err(error):
            print(f"poetry failed: {error.stderr}")
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from icerel.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started or exited non-zero.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process never ran.
        stdout: Captured standard output (empty when streamed).
        stderr: Captured standard error, or the OS/timeout reason.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def _merged_env(extra_env: Mapping[str, str] | None) -> dict[str, str] | None:
    if not extra_env:
        return None
    env = dict(os.environ)
    env.update(extra_env)
    return env


def run(
    cmd: list[str],
    cwd: Path,
    extra_env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        extra_env: Variables layered over the current environment.
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=_merged_env(extra_env),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    extra_env: Mapping[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command whose output streams straight to the terminal.

    Used for long builds where the CI log is the diagnostic; nothing is
    captured, so the error carries only the exit code.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=_merged_env(extra_env),
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)
