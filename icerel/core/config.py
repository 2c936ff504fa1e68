"""Typed release configuration.

Settings live in the ``[tool.icerel]`` table of the project's
``pyproject.toml``. Everything is optional; defaults reproduce the PyIceberg
release-candidate workflow.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from icerel import __version__

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_table

__all__ = [
    "CibuildwheelConfig",
    "ConfigError",
    "ReleaseConfig",
    "VersionSource",
    "load_config",
    "load_project_config",
    "DEFAULT_TAG_PREFIX",
    "DEFAULT_TARGETS",
    "DEFAULT_TOOL_REQUIREMENT",
]

VersionSource = Literal["poetry", "pyproject"]

DEFAULT_TAG_PREFIX = "pyiceberg-"
DEFAULT_TARGETS: tuple[str, ...] = (
    "ubuntu-22.04",
    "windows-2022",
    "macos-13",
    "macos-14",
    "macos-15",
)
DEFAULT_PYTHON_VERSIONS: tuple[str, ...] = ("3.9", "3.10", "3.11", "3.12")
DEFAULT_TOOL_REQUIREMENT = f"icerel=={__version__}"

_VERSION_SOURCES: tuple[VersionSource, ...] = ("poetry", "pyproject")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CibuildwheelConfig:
    """Environment handed to cibuildwheel.

    ``test_command`` is the single smoke test run against every wheel.
    """

    archs: str = "auto64"
    project_requires_python: str = ">=3.9,<3.13"
    test_requires: str = "pytest==7.4.2 moto==5.0.1"
    test_extras: str = "s3fs,glue"
    test_command: str = "pytest {project}/tests/avro/test_decoder.py"
    test_skip: str = "pp* *macosx*"

    def env(self) -> dict[str, str]:
        return {
            "CIBW_ARCHS": self.archs,
            "CIBW_PROJECT_REQUIRES_PYTHON": self.project_requires_python,
            "CIBW_TEST_REQUIRES": self.test_requires,
            "CIBW_TEST_EXTRAS": self.test_extras,
            "CIBW_TEST_COMMAND": self.test_command,
            "CIBW_TEST_SKIP": self.test_skip,
        }


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    tag_prefix: str = DEFAULT_TAG_PREFIX
    version_source: VersionSource = "poetry"
    targets: tuple[str, ...] = DEFAULT_TARGETS
    sdist_target_prefix: str = "ubuntu"
    python_versions: tuple[str, ...] = DEFAULT_PYTHON_VERSIONS
    wheelhouse: str = "wheelhouse"
    dist_dir: str = "dist"
    tool_requirement: str = DEFAULT_TOOL_REQUIREMENT
    cibuildwheel: CibuildwheelConfig = field(default_factory=CibuildwheelConfig)

    def builds_sdist(self, target: str) -> bool:
        """Whether ``target`` is the designated source-distribution runner."""
        return target.startswith(self.sdist_target_prefix)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from the ``[tool.icerel]`` table.

        Raises:
            ValueError: A key is present with the wrong type or value.
        """
        cibw: StrDict = get_table(data, "cibuildwheel") or {}
        defaults = cls()
        cibw_defaults = CibuildwheelConfig()

        source = _opt_str(data, "version_source", defaults.version_source)
        if source not in _VERSION_SOURCES:
            raise ValueError(
                f"version_source must be one of {', '.join(_VERSION_SOURCES)} (got {source!r})"
            )

        targets = _opt_str_tuple(data, "targets", defaults.targets)
        if not targets:
            raise ValueError("targets must not be empty")

        return cls(
            tag_prefix=_opt_str(data, "tag_prefix", defaults.tag_prefix),
            version_source=source,
            targets=targets,
            sdist_target_prefix=_opt_str(
                data, "sdist_target_prefix", defaults.sdist_target_prefix
            ),
            python_versions=_opt_str_tuple(data, "python_versions", defaults.python_versions),
            wheelhouse=_opt_str(data, "wheelhouse", defaults.wheelhouse),
            dist_dir=_opt_str(data, "dist_dir", defaults.dist_dir),
            tool_requirement=_opt_str(data, "tool_requirement", defaults.tool_requirement),
            cibuildwheel=CibuildwheelConfig(
                archs=_opt_str(cibw, "archs", cibw_defaults.archs),
                project_requires_python=_opt_str(
                    cibw, "project_requires_python", cibw_defaults.project_requires_python
                ),
                test_requires=_opt_str(cibw, "test_requires", cibw_defaults.test_requires),
                test_extras=_opt_str(cibw, "test_extras", cibw_defaults.test_extras),
                test_command=_opt_str(cibw, "test_command", cibw_defaults.test_command),
                test_skip=_opt_str(cibw, "test_skip", cibw_defaults.test_skip),
            ),
        )


def _opt_str(table: Mapping[str, object], key: str, default: str) -> str:
    if key not in table:
        return default
    value = table[key]
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _opt_str_tuple(
    table: Mapping[str, object], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    if key not in table:
        return default
    value = table[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key} must be a list of strings")
    return tuple(str(v) for v in value)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("TOML root must be a table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"File not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading {path.name}: {e}", path=path))


def read_pyproject(path: Path) -> Result[StrDict, ConfigError]:
    """Parse ``pyproject.toml`` into a string-keyed table."""
    return _parse_toml(path)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load ``[tool.icerel]`` from a ``pyproject.toml`` file.

    Args:
        path: Path to pyproject.toml

    Returns:
        Ok(ReleaseConfig) on success (defaults when the table is absent),
        Err(ConfigError) when the file is unreadable or the table is invalid.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    tool = get_table(result.value, "tool") or {}
    table = get_table(tool, "icerel")
    if table is None:
        return Ok(ReleaseConfig())

    try:
        return Ok(ReleaseConfig.from_dict(table))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid [tool.icerel] table: {e}", path=path))


def load_project_config(project_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load config for a project directory; defaults when it has no pyproject.toml."""
    path = project_root / "pyproject.toml"
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
