"""Tests for release/version.py: version parsing and branch rules."""

from __future__ import annotations

import pytest

from zrelease.core.result import Err, Ok
from zrelease.release.errors import BranchMismatch, InvalidVersionFormat
from zrelease.release.version import ReleaseVersion, is_release_branch, parse_version, validate_branch


def _version(text: str) -> ReleaseVersion:
    result = parse_version(text)
    assert isinstance(result, Ok)
    return result.value


class TestParseVersion:
    def test_major(self) -> None:
        v = _version("9.0")
        assert (v.major, v.minor, v.suffix) == (9, 0, None)
        assert v.is_major_release
        assert not v.is_prerelease

    def test_maintenance(self) -> None:
        v = _version("9.3")
        assert not v.is_major_release
        assert not v.is_prerelease

    def test_prerelease(self) -> None:
        v = _version("10.0-beta1")
        assert v.suffix == "beta1"
        assert v.is_prerelease
        assert not v.is_major_release

    @pytest.mark.parametrize("text", ["9", "9.0.1", "v9.0", "9.0-", "9.0-Beta1", "9.0-rc.1", "", "9.x"])
    def test_invalid(self, text: str) -> None:
        assert parse_version(text) == Err(InvalidVersionFormat(version=text))

    def test_derived_names(self) -> None:
        v = _version("9.1")
        assert v.tag == "9.1"
        assert v.tarball_name == "zulip-server-9.1.tar.gz"
        assert v.release_title == "Zulip Server 9.1"
        assert v.commit_message == "Release Zulip Server 9.1."
        assert str(v) == "9.1"


class TestValidateBranch:
    @pytest.mark.parametrize(
        ("version", "branch"),
        [
            ("6.0", "main"),
            ("6.5", "6.x"),
            ("6.5-beta1", "6.5-beta1-branch"),
            ("10.0-rc1", "10.0-rc1-branch"),
        ],
    )
    def test_allowed(self, version: str, branch: str) -> None:
        assert validate_branch(_version(version), branch) == Ok(None)

    @pytest.mark.parametrize(
        ("version", "branch", "expected"),
        [
            ("6.0", "6.x", "main"),
            ("6.0", "feature", "main"),
            ("6.5", "main", "6.x"),
            ("6.5", "7.x", "6.x"),
            ("6.5", "6.5-beta1-branch", "6.x"),
            ("6.5-beta1", "main", "6.5-beta1-branch"),
            ("6.5-beta1", "6.x", "6.5-beta1-branch"),
            ("6.5-beta1", "6.5-beta2-branch", "6.5-beta1-branch"),
        ],
    )
    def test_rejected(self, version: str, branch: str, expected: str) -> None:
        result = validate_branch(_version(version), branch)
        assert result == Err(BranchMismatch(version=version, branch=branch, expected=expected))

    @pytest.mark.parametrize("branch", ["main", "7.x"])
    def test_other_release_branch_is_rejected(self, branch: str) -> None:
        version = _version("6.5")
        assert is_release_branch(branch, version) is True
        assert validate_branch(version, branch) == Err(
            BranchMismatch(version="6.5", branch=branch, expected="6.x")
        )
