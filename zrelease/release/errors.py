"""Failure types for a release run.

Each failure is a small frozen dataclass carrying the facts needed to explain
it; `ReleaseError` is their union. Rendering and exit codes live in
`zrelease.output.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# -----------------------------------------------------------------------------
# Input validation
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InvalidVersionFormat:
    version: str


@dataclass(frozen=True, slots=True)
class BranchMismatch:
    version: str
    branch: str
    expected: str


# -----------------------------------------------------------------------------
# Repository state
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DirtyWorkingTree:
    paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CommitMessageMismatch:
    expected: str
    actual: str


@dataclass(frozen=True, slots=True)
class TagAlreadyExists:
    tag: str


@dataclass(frozen=True, slots=True)
class GitCommandFailed:
    command: str
    message: str


# -----------------------------------------------------------------------------
# External quality gates
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProvisioningFailed:
    returncode: int
    log: str


@dataclass(frozen=True, slots=True)
class LintFailed:
    returncode: int


@dataclass(frozen=True, slots=True)
class LinkValidationFailed:
    returncode: int


@dataclass(frozen=True, slots=True)
class SpellcheckFailed:
    returncode: int


# -----------------------------------------------------------------------------
# Changelog and version metadata
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileUnreadable:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ChangelogEntryMissing:
    version: str
    path: Path


@dataclass(frozen=True, slots=True)
class ChangelogDateMismatch:
    version: str
    found: str
    expected: str
    timezone: str


@dataclass(frozen=True, slots=True)
class SettingNotFound:
    setting: str
    path: Path


@dataclass(frozen=True, slots=True)
class VersionFieldMismatch:
    setting: str
    found: str
    expected: str


@dataclass(frozen=True, slots=True)
class MissingFeatureLevelBump:
    path: Path


@dataclass(frozen=True, slots=True)
class FeatureLevelUndocumented:
    feature_level: str
    path: Path


# -----------------------------------------------------------------------------
# GitHub CLI and publishing
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GhMissing:
    hint: str = "Install GitHub CLI: https://cli.github.com/"


@dataclass(frozen=True, slots=True)
class GhAuthRequired:
    hint: str = "Run: gh auth login"


@dataclass(frozen=True, slots=True)
class ReleaseCancelled:
    pass


@dataclass(frozen=True, slots=True)
class OutputDirUnavailable:
    reason: str


@dataclass(frozen=True, slots=True)
class TarballBuildFailed:
    returncode: int


@dataclass(frozen=True, slots=True)
class TarballNotProduced:
    path: Path


@dataclass(frozen=True, slots=True)
class UploadFailed:
    tarball: Path
    returncode: int


@dataclass(frozen=True, slots=True)
class HostReleaseFailed:
    tag: str
    message: str


@dataclass(frozen=True, slots=True)
class PublishIncomplete:
    """A publish step failed after the tag already exists.

    `done` lists the steps that completed; the operator has to finish or
    undo them by hand.
    """

    cause: PublishStepError
    done: tuple[str, ...]


PublishStepError = (
    GitCommandFailed | TarballBuildFailed | TarballNotProduced | UploadFailed | HostReleaseFailed
)


ReleaseError = (
    InvalidVersionFormat
    | BranchMismatch
    | DirtyWorkingTree
    | CommitMessageMismatch
    | TagAlreadyExists
    | GitCommandFailed
    | ProvisioningFailed
    | LintFailed
    | LinkValidationFailed
    | SpellcheckFailed
    | FileUnreadable
    | ChangelogEntryMissing
    | ChangelogDateMismatch
    | SettingNotFound
    | VersionFieldMismatch
    | MissingFeatureLevelBump
    | FeatureLevelUndocumented
    | GhMissing
    | GhAuthRequired
    | ReleaseCancelled
    | OutputDirUnavailable
    | TarballBuildFailed
    | TarballNotProduced
    | UploadFailed
    | HostReleaseFailed
    | PublishIncomplete
)
