from __future__ import annotations

import re

from icerel.core.config import DEFAULT_TAG_PREFIX
from icerel.core.result import Err, Ok, Result
from icerel.release.errors import InputError, ParseError, ValidationError
from icerel.release.model import (
    ManualTriggered,
    ReleaseCandidate,
    ReleaseInfo,
    TagTriggered,
    Trigger,
    Version,
)


_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")
_RC_RE = re.compile(r"([0-9]+)")
_RC_SEPARATOR = "rc"
_TAG_REF_PREFIX = "refs/tags/"

VERSION_FORMAT = "<number>.<number>.<number>"
RC_FORMAT = "<number>"


def parse_version(text: str) -> Version | None:
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        return None
    return Version(int(m.group(1)), int(m.group(2)), int(m.group(3)), text=text)


def parse_rc(text: str) -> ReleaseCandidate | None:
    m = _RC_RE.fullmatch(text)
    if m is None:
        return None
    return ReleaseCandidate(int(m.group(1)), text=text)


def parse_tag(tag: str, *, prefix: str = DEFAULT_TAG_PREFIX) -> Result[ReleaseInfo, ParseError]:
    """Split ``<prefix><major>.<minor>.<patch>rc<n>`` into VERSION and RC.

    A leading ``refs/tags/`` is accepted so the raw ``GITHUB_REF`` can be
    passed through. VERSION is everything before the last ``rc``; RC is
    everything after the first one. Both must then have their canonical
    shape.
    """
    name = tag.removeprefix(_TAG_REF_PREFIX)
    body = name.removeprefix(prefix)

    if _RC_SEPARATOR not in body:
        return Err(ParseError(tag=name, reason="missing 'rc' separator"))

    version_part = body[: body.rindex(_RC_SEPARATOR)]
    rc_part = body[body.index(_RC_SEPARATOR) + len(_RC_SEPARATOR) :]
    if not version_part:
        return Err(ParseError(tag=name, reason="empty version segment"))
    if not rc_part:
        return Err(ParseError(tag=name, reason="empty rc segment"))

    version = parse_version(version_part)
    if version is None:
        return Err(
            ParseError(tag=name, reason=f"version ({version_part}) is not {VERSION_FORMAT}")
        )
    rc = parse_rc(rc_part)
    if rc is None:
        return Err(ParseError(tag=name, reason=f"rc ({rc_part}) is not {RC_FORMAT}"))

    return Ok(ReleaseInfo(version=version, rc=rc))


def validate_inputs(version: str, rc: str) -> Result[ReleaseInfo, ValidationError]:
    """Validate manually supplied inputs; on success they are echoed unchanged."""
    parsed_version = parse_version(version)
    if parsed_version is None:
        return Err(ValidationError(field="version", value=version, expected=VERSION_FORMAT))

    parsed_rc = parse_rc(rc)
    if parsed_rc is None:
        return Err(ValidationError(field="rc", value=rc, expected=RC_FORMAT))

    return Ok(ReleaseInfo(version=parsed_version, rc=parsed_rc))


def validate_trigger(
    trigger: Trigger, *, prefix: str = DEFAULT_TAG_PREFIX
) -> Result[ReleaseInfo, InputError]:
    match trigger:
        case TagTriggered(tag=tag):
            return parse_tag(tag, prefix=prefix)
        case ManualTriggered(version=version, rc=rc):
            return validate_inputs(version, rc)
