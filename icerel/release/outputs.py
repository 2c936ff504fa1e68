from __future__ import annotations

from pathlib import Path
from typing import TextIO

from icerel.core.result import Err, Ok, Result
from icerel.platform.files import append_text
from icerel.release.errors import OutputError
from icerel.release.model import ReleaseInfo


def format_outputs(info: ReleaseInfo) -> str:
    return "".join(f"{key}={value}\n" for key, value in info.outputs())


def write_outputs(
    info: ReleaseInfo, *, path: Path | None, stream: TextIO
) -> Result[None, OutputError]:
    """Export VERSION and RC as step outputs.

    Appends to ``path`` (the runner's ``$GITHUB_OUTPUT`` file) when given,
    otherwise writes the same lines to ``stream``.
    """
    text = format_outputs(info)
    if path is None:
        stream.write(text)
        return Ok(None)

    try:
        append_text(path, text)
    except OSError as e:
        return Err(OutputError(message=f"failed to write step outputs: {e}", path=path))
    return Ok(None)
