from __future__ import annotations

from icerel.core.result import Err, Ok
from icerel.release.consistency import check_version_consistency
from icerel.release.errors import ConsistencyError
from icerel.release.model import Version


def test_equal_versions_pass() -> None:
    version = Version(0, 8, 0, text="0.8.0")
    assert check_version_consistency(version, "0.8.0") == Ok(version)


def test_mismatch_names_both_values() -> None:
    result = check_version_consistency(Version(0, 8, 1, text="0.8.1"), "0.8.0")

    assert result == Err(ConsistencyError(version="0.8.1", declared="0.8.0"))
    assert isinstance(result, Err)
    assert "0.8.1" in result.error.message
    assert "0.8.0" in result.error.message


def test_comparison_is_textual() -> None:
    result = check_version_consistency(Version(0, 8, 0, text="00.8.0"), "0.8.0")
    assert isinstance(result, Err)


def test_rc_qualified_declared_version_does_not_match() -> None:
    result = check_version_consistency(Version(0, 8, 0, text="0.8.0"), "0.8.0rc1")
    assert isinstance(result, Err)
