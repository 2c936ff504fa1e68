from __future__ import annotations

from icerel.core.result import Err, Ok, Result
from icerel.release.errors import ConsistencyError
from icerel.release.model import Version


def check_version_consistency(version: Version, declared: str) -> Result[Version, ConsistencyError]:
    """Gate: the validated VERSION must equal the declared version exactly.

    No normalisation is applied on either side, so ``0.8.0`` and ``00.8.0`` differ.
    """
    if str(version) != declared:
        return Err(ConsistencyError(version=str(version), declared=declared))
    return Ok(version)
