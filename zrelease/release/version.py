"""Release version parsing and branch rules.

A Zulip Server version is `MAJOR.MINOR` with an optional `-suffix` for
prereleases (`9.0`, `9.3`, `10.0-beta1`). Where a version may be released
from depends on its kind:

- major release (`N.0`): only from `main`
- prerelease (`N.M-suffix`): only from `N.M-suffix-branch`
- maintenance release (`N.M`, M > 0): only from `N.x`
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from zrelease.core.result import Err, Ok, Result
from zrelease.release.errors import BranchMismatch, InvalidVersionFormat

MAIN_BRANCH = "main"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)(?:-([a-z0-9]+))?$")
_MAJOR_RE = re.compile(r"^\d+\.0$")
_MAINTENANCE_BRANCH_RE = re.compile(r"^\d+\.x$")


@dataclass(frozen=True, slots=True)
class ReleaseVersion:
    text: str
    major: int
    minor: int
    suffix: str | None = None

    def __str__(self) -> str:
        return self.text

    @property
    def is_prerelease(self) -> bool:
        return self.suffix is not None

    @property
    def is_major_release(self) -> bool:
        return _MAJOR_RE.match(self.text) is not None

    @property
    def expected_branch(self) -> str:
        if self.is_major_release:
            return MAIN_BRANCH
        if self.is_prerelease:
            return f"{self.text}-branch"
        return f"{self.major}.x"

    @property
    def tag(self) -> str:
        return self.text

    @property
    def tarball_name(self) -> str:
        return f"zulip-server-{self.text}.tar.gz"

    @property
    def release_title(self) -> str:
        return f"Zulip Server {self.text}"

    @property
    def commit_message(self) -> str:
        return f"Release Zulip Server {self.text}."


def parse_version(text: str) -> Result[ReleaseVersion, InvalidVersionFormat]:
    m = _VERSION_RE.match(text)
    if m is None:
        return Err(InvalidVersionFormat(version=text))
    return Ok(
        ReleaseVersion(
            text=text,
            major=int(m.group(1)),
            minor=int(m.group(2)),
            suffix=m.group(3),
        )
    )


def is_release_branch(branch: str, version: ReleaseVersion) -> bool:
    """True for any branch a release could ever be cut from.

    Coarse filter only: `validate_branch` also requires an exact match with
    `version.expected_branch`, which is the check that decides.
    """
    return (
        branch == MAIN_BRANCH
        or _MAINTENANCE_BRANCH_RE.match(branch) is not None
        or branch == f"{version.text}-branch"
    )


def validate_branch(version: ReleaseVersion, branch: str) -> Result[None, BranchMismatch]:
    """Check that `version` may be released from `branch`. Pure."""
    expected = version.expected_branch
    mismatch = BranchMismatch(version=version.text, branch=branch, expected=expected)

    if version.is_major_release:
        return Ok(None) if branch == MAIN_BRANCH else Err(mismatch)

    if not is_release_branch(branch, version) or branch != expected:
        return Err(mismatch)
    return Ok(None)
