from __future__ import annotations

from zrelease.core.result import Err, Ok, Result
from zrelease.git.repository import Repository
from zrelease.release.errors import (
    CommitMessageMismatch,
    DirtyWorkingTree,
    GitCommandFailed,
    ReleaseError,
    TagAlreadyExists,
)
from zrelease.release.version import ReleaseVersion


def ensure_clean_tree(repo: Repository) -> Result[None, ReleaseError]:
    status = repo.status()
    if isinstance(status, Err):
        e = status.error
        return Err(GitCommandFailed(command=e.command, message=e.message))

    if not status.value.is_clean:
        paths = tuple(entry.path for entry in status.value.tracked_changes)
        return Err(DirtyWorkingTree(paths=paths))
    return Ok(None)


def ensure_release_commit(repo: Repository, version: ReleaseVersion) -> Result[None, ReleaseError]:
    """HEAD must be the "Release Zulip Server X.Y." commit.

    Once the release manager has committed follow-up work, a re-run fails
    here because HEAD has moved on.
    """
    subject = repo.head_subject()
    if isinstance(subject, Err):
        e = subject.error
        return Err(GitCommandFailed(command=e.command, message=e.message))

    expected = version.commit_message
    if subject.value != expected:
        return Err(CommitMessageMismatch(expected=expected, actual=subject.value))
    return Ok(None)


def ensure_not_tagged(repo: Repository, version: ReleaseVersion) -> Result[None, ReleaseError]:
    """The release tag must not exist yet.

    Tagging does not move HEAD, so right after a release the tree is still
    clean and still at the release commit; the existing tag is what stops a
    second run before any gate executes.
    """
    exists = repo.tag_exists(version.tag)
    if isinstance(exists, Err):
        e = exists.error
        return Err(GitCommandFailed(command=e.command, message=e.message))
    if exists.value:
        return Err(TagAlreadyExists(tag=version.tag))
    return Ok(None)


def check_repository_state(
    repo: Repository, version: ReleaseVersion
) -> Result[None, ReleaseError]:
    clean = ensure_clean_tree(repo)
    if isinstance(clean, Err):
        return clean
    commit = ensure_release_commit(repo, version)
    if isinstance(commit, Err):
        return commit
    return ensure_not_tagged(repo, version)
