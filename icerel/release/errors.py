"""Failure kinds of a release-candidate run.

Every kind is terminal: nothing is retried, and the CLI maps each one to an
exit code before any build or publish work starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


@dataclass(frozen=True, slots=True)
class ParseError:
    """A tag did not yield both a version and an rc segment."""

    tag: str
    reason: str

    @property
    def message(self) -> str:
        return f"unable to parse VERSION or RC from tag ({self.tag}): {self.reason}"

    @property
    def hint(self) -> str:
        return "Expected <prefix><major>.<minor>.<patch>rc<n>, e.g. pyiceberg-0.8.0rc2"


@dataclass(frozen=True, slots=True)
class ValidationError:
    """An explicit input did not have its required shape."""

    field: Literal["version", "rc"]
    value: str
    expected: str

    @property
    def message(self) -> str:
        return f"{self.field} ({self.value}) must be in the format: {self.expected}"

    @property
    def hint(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class ConsistencyError:
    """The validated version differs from the project's declared version."""

    version: str
    declared: str

    @property
    def message(self) -> str:
        return (
            f"input version ({self.version}) does not match the declared "
            f"project version ({self.declared})"
        )

    @property
    def hint(self) -> str:
        return "Bump the project version before tagging the release candidate"


@dataclass(frozen=True, slots=True)
class TriggerError:
    """The CI environment does not describe a supported trigger."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataError:
    """The declared project version could not be read."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildError:
    """A build could not be planned, or one of its steps failed."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class OutputError:
    """Step outputs or rendered files could not be written."""

    message: str
    path: Path | None = None

    @property
    def hint(self) -> str | None:
        return str(self.path) if self.path is not None else None


@dataclass(frozen=True, slots=True)
class BundleError:
    """A bundle could not be uploaded or merged."""

    message: str
    path: Path | None = None

    @property
    def hint(self) -> str | None:
        return str(self.path) if self.path is not None else None


@dataclass(frozen=True, slots=True)
class WorkflowError:
    message: str
    hint: str | None = None


InputError = ParseError | ValidationError
