"""Tests for tagbump.versions."""

from __future__ import annotations

import pytest

from tagbump.errors import VersionError
from tagbump.versions import (
    UpdateType,
    compare,
    difference,
    increment,
    is_version,
    parse_version,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3

    def test_prerelease_and_build(self) -> None:
        v = parse_version("2.0.0-rc.1+abc1234")
        assert v.prerelease == "rc.1"
        assert v.build == "abc1234"

    @pytest.mark.parametrize("value", ["1.2", "5", "v1.2.3", "", "latest"])
    def test_rejects_incomplete_versions(self, value: str) -> None:
        assert not is_version(value)
        with pytest.raises(VersionError, match="Cannot parse semantic version"):
            parse_version(value)

    def test_is_version(self) -> None:
        assert is_version("0.0.0")
        assert is_version("1.2.3-pre.1+abc")


class TestIncrement:
    def test_patch(self) -> None:
        assert increment("1.2.3", UpdateType.PATCH) == "1.2.4"

    def test_minor(self) -> None:
        assert increment("1.2.3", UpdateType.MINOR) == "1.3.0"

    def test_major(self) -> None:
        assert increment("1.2.3", UpdateType.MAJOR) == "2.0.0"

    def test_zero(self) -> None:
        assert increment("0.0.0", UpdateType.PATCH) == "0.0.1"

    def test_high_patch(self) -> None:
        assert increment("1.0.99", UpdateType.PATCH) == "1.0.100"

    def test_prerelease_and_build(self) -> None:
        result = increment(
            "1.2.3", UpdateType.MAJOR, prerelease="pre.1", build="abc1234"
        )
        assert result == "2.0.0-pre.1+abc1234"

    def test_patch_of_prerelease_keeps_version(self) -> None:
        result = increment("1.2.3-rc.1+old", UpdateType.PATCH, prerelease="pre.2")
        assert result == "1.2.3-pre.2"

    def test_prerelease_of_pending_release(self) -> None:
        result = increment(
            "2.0.0-rc.1", UpdateType.PATCH, prerelease="pre.1", build="abc"
        )
        assert result == "2.0.0-pre.1+abc"

    def test_prerelease_without_new_prerelease(self) -> None:
        assert increment("2.0.0-rc.1", UpdateType.PATCH) == "2.0.0"

    def test_minor_of_prerelease(self) -> None:
        assert increment("1.2.0-rc.1", UpdateType.MINOR) == "1.2.0"
        assert increment("1.2.3-rc.1", UpdateType.MINOR) == "1.3.0"

    def test_major_of_prerelease(self) -> None:
        assert increment("2.0.0-rc.1", UpdateType.MAJOR) == "2.0.0"
        assert increment("2.1.0-rc.1", UpdateType.MAJOR) == "3.0.0"
        assert increment("2.0.1-rc.1", UpdateType.MAJOR) == "3.0.0"


class TestDifference:
    def test_major(self) -> None:
        assert difference("1.2.3", "2.0.0") is UpdateType.MAJOR

    def test_minor(self) -> None:
        assert difference("1.2.3", "1.3.0") is UpdateType.MINOR

    def test_patch(self) -> None:
        assert difference("1.2.3", "1.2.4") is UpdateType.PATCH

    def test_prerelease_only(self) -> None:
        assert difference("1.2.3", "1.2.3-pre.1") is UpdateType.PATCH


class TestCompare:
    def test_ordering(self) -> None:
        assert compare("1.2.3", "1.10.0") < 0
        assert compare("2.0.0", "1.99.99") > 0
        assert compare("1.0.0", "1.0.0") == 0

    def test_prerelease_is_lower(self) -> None:
        assert compare("1.0.0-pre.1", "1.0.0") < 0


class TestUpdateType:
    def test_str(self) -> None:
        assert str(UpdateType.MINOR) == "minor"
