from __future__ import annotations

import pytest

from icerel.release.model import ReleaseCandidate, ReleaseInfo, Version


def _info() -> ReleaseInfo:
    return ReleaseInfo(version=Version(0, 8, 0, text="0.8.0"), rc=ReleaseCandidate(2, text="2"))


def test_derived_names() -> None:
    info = _info()
    assert info.rc_version == "0.8.0rc2"
    assert info.tag("pyiceberg-") == "pyiceberg-0.8.0rc2"
    assert info.outputs() == (("VERSION", "0.8.0"), ("RC", "2"))


def test_release_info_is_immutable() -> None:
    info = _info()
    with pytest.raises(AttributeError):
        info.rc = ReleaseCandidate(3, text="3")  # type: ignore[misc]


def test_versions_order_numerically() -> None:
    assert Version(0, 10, 0, text="0.10.0") > Version(0, 9, 9, text="0.9.9")
