"""Git operations module.

Usage:
    from zrelease.git import Repository

    repo = Repository(Path("/srv/zulip"))
    status = repo.status()
    if status.is_ok():
        print(f"Branch: {status.unwrap().branch}")
"""

from zrelease.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
