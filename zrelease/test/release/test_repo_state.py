"""Tests for release/repo_state.py."""

from __future__ import annotations

from pathlib import Path

from zrelease.core.result import Err, Ok
from zrelease.git.repository import StatusEntry
from zrelease.release.errors import CommitMessageMismatch, DirtyWorkingTree, TagAlreadyExists
from zrelease.release.repo_state import check_repository_state, ensure_clean_tree
from zrelease.release.version import parse_version
from zrelease.test.fakes import FakeRepository


def _v91():
    result = parse_version("9.1")
    assert isinstance(result, Ok)
    return result.value


def test_clean_tree_with_release_commit(tmp_path: Path) -> None:
    repo = FakeRepository(tmp_path, branch="9.x", subject="Release Zulip Server 9.1.")
    assert check_repository_state(repo, _v91()) == Ok(None)


def test_untracked_files_are_allowed(tmp_path: Path) -> None:
    repo = FakeRepository(tmp_path, entries=(StatusEntry(xy="??", path="tarballs/"),))
    assert ensure_clean_tree(repo) == Ok(None)


def test_dirty_tree_lists_tracked_paths(tmp_path: Path) -> None:
    repo = FakeRepository(
        tmp_path,
        subject="Release Zulip Server 9.1.",
        entries=(
            StatusEntry(xy="M ", path="version.py"),
            StatusEntry(xy="??", path="scratch.txt"),
            StatusEntry(xy=" M", path="docs/overview/changelog.md"),
        ),
    )

    result = check_repository_state(repo, _v91())

    assert result == Err(DirtyWorkingTree(paths=("version.py", "docs/overview/changelog.md")))


def test_commit_message_must_match_exactly(tmp_path: Path) -> None:
    repo = FakeRepository(tmp_path, subject="Release Zulip Server 9.1")

    result = check_repository_state(repo, _v91())

    assert result == Err(
        CommitMessageMismatch(expected="Release Zulip Server 9.1.", actual="Release Zulip Server 9.1")
    )


def test_existing_tag_means_already_released(tmp_path: Path) -> None:
    repo = FakeRepository(tmp_path, subject="Release Zulip Server 9.1.", existing_tags=("9.1",))

    result = check_repository_state(repo, _v91())

    assert result == Err(TagAlreadyExists(tag="9.1"))


def test_other_tags_do_not_matter(tmp_path: Path) -> None:
    repo = FakeRepository(tmp_path, subject="Release Zulip Server 9.1.", existing_tags=("9.0", "9.1-rc1"))
    assert check_repository_state(repo, _v91()) == Ok(None)
