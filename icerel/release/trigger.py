"""Resolve the CI event into a trigger variant.

The variant is decided once, here, from the runner environment. Nothing
downstream looks at event names or payload shapes again.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from icerel.core.result import Err, Ok, Result
from icerel.core.structured import StrDict, as_str_dict, get_table
from icerel.release.errors import TriggerError
from icerel.release.model import ManualTriggered, TagTriggered, Trigger


EVENT_PUSH = "push"
EVENT_DISPATCH = "workflow_dispatch"

_TAG_REF_PREFIX = "refs/tags/"


def resolve_trigger(env: Mapping[str, str]) -> Result[Trigger, TriggerError]:
    event = env.get("GITHUB_EVENT_NAME", "")

    if event == EVENT_PUSH:
        ref = env.get("GITHUB_REF", "")
        if not ref.startswith(_TAG_REF_PREFIX):
            return Err(
                TriggerError(
                    message=f"push event is not a tag push (GITHUB_REF={ref or '<unset>'})",
                    hint="Release candidates are built from tags like pyiceberg-0.8.0rc2",
                )
            )
        return Ok(TagTriggered(tag=ref.removeprefix(_TAG_REF_PREFIX)))

    if event == EVENT_DISPATCH:
        return _manual_trigger(env)

    return Err(
        TriggerError(
            message=f"unsupported event: {event or '<unset>'}",
            hint=f"Expected {EVENT_PUSH} or {EVENT_DISPATCH}, or pass --tag / --version --rc",
        )
    )


def _manual_trigger(env: Mapping[str, str]) -> Result[Trigger, TriggerError]:
    version = env.get("INPUT_VERSION")
    rc = env.get("INPUT_RC")

    if version is None or rc is None:
        inputs = _dispatch_inputs(env)
        if isinstance(inputs, Err):
            return inputs
        if version is None:
            version = _input_text(inputs.value.get("version"))
        if rc is None:
            rc = _input_text(inputs.value.get("rc"))

    if version is None:
        return Err(TriggerError(message="manual dispatch is missing the 'version' input"))
    if rc is None:
        return Err(TriggerError(message="manual dispatch is missing the 'rc' input"))

    return Ok(ManualTriggered(version=version, rc=rc))


def _dispatch_inputs(env: Mapping[str, str]) -> Result[StrDict, TriggerError]:
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_path:
        return Ok({})

    path = Path(event_path)
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(TriggerError(message=f"failed to read event payload: {e}", hint=str(path)))
    except json.JSONDecodeError as e:
        return Err(TriggerError(message=f"invalid JSON in event payload: {e}", hint=str(path)))

    payload = as_str_dict(obj)
    if payload is None:
        return Err(TriggerError(message="event payload root is not an object", hint=str(path)))
    return Ok(get_table(payload, "inputs") or {})


def _input_text(value: object) -> str | None:
    """Render a dispatch input as the string the shell would have seen."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value
    return None
