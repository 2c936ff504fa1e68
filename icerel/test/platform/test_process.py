"""Tests for icerel.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from icerel.core.result import Err, Ok
from icerel.platform.process import ProcessError, run, run_streaming


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(("poetry", "version"), 1, "", "")
        assert str(error) == "poetry version failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(("cibuildwheel", "--output-dir", "wheelhouse", "--config-file"), 2, "", "")
        assert str(error) == "cibuildwheel --output-dir wheelhouse ... failed (exit 2)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('0.8.0')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert result.value.strip() == "0.8.0"

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('nope'); sys.exit(42)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert result.error.stderr == "nope"

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["icerel_nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_extra_env_is_layered(self, tmp_path: Path) -> None:
        code = "import os; print(os.environ['CIBW_ARCHS'], 'PATH' in os.environ)"
        result = run([sys.executable, "-c", code], cwd=tmp_path, extra_env={"CIBW_ARCHS": "auto64"})

        assert isinstance(result, Ok)
        assert result.value.split() == ["auto64", "True"]

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRunStreaming:
    def test_success(self, tmp_path: Path) -> None:
        assert run_streaming([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure_keeps_exit_code(self, tmp_path: Path) -> None:
        result = run_streaming([sys.executable, "-c", "raise SystemExit(3)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 3
