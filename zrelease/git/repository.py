"""Git repository abstraction.

This module provides the Repository class for the git operations a release
needs: inspecting state before the release, and tagging/pushing after it.
All operations return Result types for proper error handling.

Usage:
    repo = Repository(Path("/srv/zulip"))

    match repo.status():
        case Ok(status):
            print(f"Branch: {status.branch}")
            if status.is_clean:
                print("Working tree clean")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from zrelease.core.result import Err, Ok, Result
from zrelease.platform.process import ProcessError
from zrelease.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed `git status --porcelain=v1 -b`.

    Attributes:
        branch: Current branch name
        upstream: Upstream branch (e.g., "upstream/main"), None if not set
        entries: All status entries (staged, unstaged, untracked)
    """

    branch: str
    upstream: str | None = None
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if there are no uncommitted changes to tracked files.

        Untracked files are ignored: the release tarball is built from the
        committed tree, so they cannot leak into it.
        """
        return not self.tracked_changes

    @property
    def tracked_changes(self) -> list[StatusEntry]:
        """Entries with staged or unstaged modifications."""
        return [e for e in self.entries if not e.is_untracked]


class Repository:
    """A git checkout, addressed explicitly by path.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a git checkout (a .git directory or worktree file)."""
        return (self.path / ".git").exists()

    def status(self) -> Result[GitStatus, GitError]:
        """Get repository status.

        Runs `git status --porcelain=v1 -b` and parses the output.
        """
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(self._error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def current_branch(self) -> Result[str, GitError]:
        """Get current branch name; a detached HEAD is an error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse", e, "cannot determine branch"))
            case Ok(stdout):
                branch = stdout.strip()
                if branch == "HEAD":
                    return Err(GitError(command="rev-parse", message="HEAD is detached"))
                return Ok(branch)

    def head_subject(self) -> Result[str, GitError]:
        """Subject line of the most recent commit."""
        result = self._run(["log", "-1", "--format=%s"])
        match result:
            case Err(e):
                return Err(self._error("log", e, "cannot read HEAD commit"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def diff_from_parent(self, path: str) -> Result[str, GitError]:
        """Unified diff of `path` between HEAD~ and the working tree."""
        result = self._run(["diff", "HEAD~", "--", path])
        match result:
            case Err(e):
                return Err(self._error("diff", e, f"cannot diff {path}"))
            case Ok(stdout):
                return Ok(stdout)

    def config_value(self, key: str) -> str | None:
        """Read a git config value; None when unset or unreadable."""
        result = self._run(["config", "--get", key])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        """True if `refs/tags/<name>` exists."""
        result = self._run(["rev-parse", "-q", "--verify", f"refs/tags/{name}"])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1 and not e.stderr.strip():
                return Ok(False)
            case Err(e):
                return Err(self._error("rev-parse", e, f"cannot look up tag {name}"))

    def create_tag(self, name: str) -> Result[None, GitError]:
        """Create a lightweight tag at HEAD."""
        result = self._run(["tag", name])
        if isinstance(result, Err):
            return Err(self._error("tag", result.error, f"cannot create tag {name}"))
        return Ok(None)

    def push(self, remote: str, *refspecs: str) -> Result[None, GitError]:
        """Push refspecs to a remote in a single push."""
        result = self._run(["push", remote, *refspecs])
        if isinstance(result, Err):
            return Err(self._error("push", result.error, f"push to {remote} failed"))
        return Ok(None)

    def _error(self, command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _parse_status(self, output: str) -> GitStatus:
        lines = [ln for ln in output.splitlines() if ln.strip()]

        if not lines:
            return GitStatus(branch="")

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch, upstream = self._parse_branch_line(lines[0])

        entries: list[StatusEntry] = []
        for line in lines[1:]:
            entry = self._parse_entry(line)
            if entry:
                entries.append(entry)

        return GitStatus(branch=branch, upstream=upstream, entries=tuple(entries))

    def _parse_branch_line(self, line: str) -> tuple[str, str | None]:
        s = line.strip()
        if s.startswith("##"):
            s = s[2:].lstrip()

        s = s.split(" [", 1)[0].strip()

        if "..." in s:
            left, right = s.split("...", 1)
            return (left.strip(), right.strip())

        return (s, None)

    def _parse_entry(self, line: str) -> StatusEntry | None:
        if len(line) < 4:
            return None

        if line.startswith("?? "):
            return StatusEntry(xy="??", path=line[3:])

        return StatusEntry(xy=line[:2], path=line[3:])
