from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Channel = Literal["svn", "pypi"]
CHANNELS: tuple[Channel, ...] = ("svn", "pypi")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    """``major.minor.patch``; ``text`` keeps the digits exactly as supplied."""

    major: int
    minor: int
    patch: int
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True, order=True)
class ReleaseCandidate:
    number: int
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    """Validated VERSION and RC for one run.

    Computed once at entry and handed to every later stage.
    """

    version: Version
    rc: ReleaseCandidate

    @property
    def rc_version(self) -> str:
        """Package version used for the package-index channel, e.g. ``0.8.0rc2``."""
        return f"{self.version}rc{self.rc}"

    def tag(self, prefix: str) -> str:
        return f"{prefix}{self.rc_version}"

    def outputs(self) -> tuple[tuple[str, str], ...]:
        return (("VERSION", str(self.version)), ("RC", str(self.rc)))


@dataclass(frozen=True, slots=True)
class TagTriggered:
    """Run started by pushing a release-candidate tag."""

    tag: str


@dataclass(frozen=True, slots=True)
class ManualTriggered:
    """Run started by manual dispatch with explicit inputs."""

    version: str
    rc: str


Trigger = TagTriggered | ManualTriggered
