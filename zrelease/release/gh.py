"""GitHub CLI (`gh`) adapter: authentication check and release creation."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from zrelease.core.result import Err, Ok, Result
from zrelease.output.console import ConsoleProtocol
from zrelease.platform.process import run as run_process
from zrelease.release.errors import GhAuthRequired, GhMissing, HostReleaseFailed
from zrelease.release.timeouts import GH_RELEASE_TIMEOUT_SECONDS, GH_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class HostRelease:
    tag: str
    title: str
    notes_file: Path
    prerelease: bool
    assets: tuple[Path, ...]


def release_create_command(release: HostRelease) -> list[str]:
    cmd = [
        "gh",
        "release",
        "create",
        release.tag,
        "--title",
        release.title,
        "--notes-file",
        str(release.notes_file),
    ]
    if release.prerelease:
        cmd.append("--prerelease")
    cmd.extend(str(asset) for asset in release.assets)
    return cmd


def ensure_gh_available(
    which: Callable[[str], str | None] | None = None,
) -> Result[None, GhMissing]:
    if (which or shutil.which)("gh") is None:
        return Err(GhMissing())
    return Ok(None)


def ensure_gh_auth(*, repo_root: Path) -> Result[None, GhAuthRequired]:
    result = run_process(["gh", "auth", "status"], cwd=repo_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(GhAuthRequired())
    return Ok(None)


def create_release(
    *,
    repo_root: Path,
    release: HostRelease,
    console: ConsoleProtocol,
) -> Result[str, HostReleaseFailed]:
    """Create the GitHub release and upload its assets; returns the release URL."""
    cmd = release_create_command(release)
    console.command(cmd)
    result = run_process(cmd, cwd=repo_root, timeout=GH_RELEASE_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        return Err(
            HostReleaseFailed(
                tag=release.tag,
                message=e.stderr.strip() or str(e),
            )
        )
    return Ok(result.value.strip())


class ReleaseHost(Protocol):
    """Where the release entry is published."""

    def ensure_ready(self) -> Result[None, GhMissing | GhAuthRequired]: ...

    def create_release(self, release: HostRelease) -> Result[str, HostReleaseFailed]: ...


class GhCli:
    """`ReleaseHost` backed by the gh command line client."""

    def __init__(self, *, repo_root: Path, console: ConsoleProtocol) -> None:
        self._root = repo_root
        self._console = console

    def ensure_ready(self) -> Result[None, GhMissing | GhAuthRequired]:
        available = ensure_gh_available()
        if isinstance(available, Err):
            return available
        return ensure_gh_auth(repo_root=self._root)

    def create_release(self, release: HostRelease) -> Result[str, HostReleaseFailed]:
        return create_release(repo_root=self._root, release=release, console=self._console)
