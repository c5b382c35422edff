"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zrelease.core.errors import ErrorCode
from zrelease.output.console import Style
from zrelease.release.errors import (
    BranchMismatch,
    ChangelogDateMismatch,
    ChangelogEntryMissing,
    CommitMessageMismatch,
    DirtyWorkingTree,
    FeatureLevelUndocumented,
    FileUnreadable,
    GhAuthRequired,
    GhMissing,
    GitCommandFailed,
    HostReleaseFailed,
    InvalidVersionFormat,
    LintFailed,
    LinkValidationFailed,
    MissingFeatureLevelBump,
    OutputDirUnavailable,
    ProvisioningFailed,
    PublishIncomplete,
    ReleaseCancelled,
    ReleaseError,
    SettingNotFound,
    SpellcheckFailed,
    TagAlreadyExists,
    TarballBuildFailed,
    TarballNotProduced,
    UploadFailed,
    VersionFieldMismatch,
)

if TYPE_CHECKING:
    from zrelease.output.console import ConsoleProtocol

__all__ = ["describe_release_error", "print_release_error", "release_error_exit_code"]


def describe_release_error(error: ReleaseError) -> tuple[str, str | None]:
    """One-line message and optional hint for an error."""
    match error:
        case InvalidVersionFormat(version=version):
            return (
                f"version format not understood: {version!r}",
                "expected MAJOR.MINOR or MAJOR.MINOR-suffix, e.g. 9.0, 9.3, 10.0-beta1",
            )
        case BranchMismatch(version=version, branch=branch, expected=expected):
            return (f"{version} must be released from {expected}, not {branch}", None)
        case DirtyWorkingTree(paths=paths):
            return (
                "there are uncommitted changes",
                ", ".join(paths) if paths else None,
            )
        case CommitMessageMismatch(expected=expected, actual=actual):
            return (
                f"HEAD is {actual!r}, expected {expected!r}",
                "commit the release changes with that exact message",
            )
        case TagAlreadyExists(tag=tag):
            return (
                f"tag {tag} already exists; this release has already been tagged",
                "finish or repair the earlier run by hand instead of re-running",
            )
        case GitCommandFailed(command=command, message=message):
            return (f"git {command} failed: {message}", None)
        case ProvisioningFailed(returncode=rc):
            return (f"provision failed (exit {rc})", None)
        case LintFailed(returncode=rc):
            return (f"changelog lint failed (exit {rc})", None)
        case LinkValidationFailed(returncode=rc):
            return (f"documentation link check failed (exit {rc})", None)
        case SpellcheckFailed(returncode=rc):
            return (f"changelog spellcheck failed (exit {rc})", None)
        case FileUnreadable(path=path, reason=reason):
            return (f"cannot read {path}: {reason}", None)
        case ChangelogEntryMissing(version=version, path=path):
            return (f"no '### {version} -- <date>' heading in {path}", None)
        case ChangelogDateMismatch(version=version, found=found, expected=expected, timezone=tz):
            return (
                f"changelog date for {version} is {found}, expected {expected}",
                f"dates are checked in {tz}",
            )
        case SettingNotFound(setting=setting, path=path):
            return (f"{setting} not found in {path}", None)
        case VersionFieldMismatch(setting=setting, found=found, expected=expected):
            return (f"{setting} is {found!r}, expected {expected!r}", None)
        case MissingFeatureLevelBump(path=path):
            return (
                f"API_FEATURE_LEVEL was not bumped in {path.name}",
                "major releases must bump the feature level in the release commit",
            )
        case FeatureLevelUndocumented(feature_level=level, path=path):
            return (f"'**Feature level {level}**' is not documented in {path}", None)
        case GhMissing(hint=hint) | GhAuthRequired(hint=hint):
            message = "gh: missing" if isinstance(error, GhMissing) else "gh auth required"
            return (message, hint)
        case ReleaseCancelled():
            return ("release cancelled; nothing was tagged or pushed", None)
        case OutputDirUnavailable(reason=reason):
            return (f"cannot prepare output directory: {reason}", None)
        case TarballBuildFailed(returncode=rc):
            return (f"tarball build failed (exit {rc})", None)
        case TarballNotProduced(path=path):
            return (f"tarball not produced: {path}", None)
        case UploadFailed(tarball=tarball, returncode=rc):
            return (f"upload of {tarball.name} failed (exit {rc})", None)
        case HostReleaseFailed(tag=tag, message=message):
            return (f"GitHub release {tag} failed: {message}", None)
        case PublishIncomplete(cause=cause, done=done):
            message, _ = describe_release_error(cause)
            return (
                f"{message}; release is partially published",
                "already done: " + "; ".join(done) + ". Finish the remaining steps by hand.",
            )
    return (str(error), None)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print release error to console with appropriate formatting."""
    message, hint = describe_release_error(error)
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
    if isinstance(error, ProvisioningFailed) and error.log:
        console.print(error.log, Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error:
        case InvalidVersionFormat() | BranchMismatch():
            return int(ErrorCode.USER_ERROR)
        case GhMissing() | GhAuthRequired():
            return int(ErrorCode.ENV_ERROR)
        case DirtyWorkingTree() | CommitMessageMismatch() | TagAlreadyExists() | GitCommandFailed():
            return int(ErrorCode.STATE_ERROR)
        case ProvisioningFailed() | LintFailed() | LinkValidationFailed() | SpellcheckFailed():
            return int(ErrorCode.CHECK_ERROR)
        case (
            ChangelogEntryMissing()
            | ChangelogDateMismatch()
            | SettingNotFound()
            | VersionFieldMismatch()
            | MissingFeatureLevelBump()
            | FeatureLevelUndocumented()
        ):
            return int(ErrorCode.CHECK_ERROR)
        case FileUnreadable() | OutputDirUnavailable():
            return int(ErrorCode.IO_ERROR)
        case ReleaseCancelled():
            return int(ErrorCode.CANCELLED)
        case (
            TarballBuildFailed()
            | TarballNotProduced()
            | UploadFailed()
            | HostReleaseFailed()
            | PublishIncomplete()
        ):
            return int(ErrorCode.PUBLISH_ERROR)
    return int(ErrorCode.PUBLISH_ERROR)
