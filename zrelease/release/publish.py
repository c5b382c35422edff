"""Tag, build, upload, push, and create the GitHub release.

Runs only after every check has passed and the confirmation delay has
elapsed. There is no rollback: once the tag exists, a failing step is
reported as `PublishIncomplete` listing what already happened, and the
release manager finishes or reverts by hand.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from zrelease.core.config import ReleaseConfig
from zrelease.core.result import Err, Ok, Result
from zrelease.git.repository import Repository
from zrelease.output.console import ConsoleProtocol
from zrelease.release.errors import (
    GitCommandFailed,
    OutputDirUnavailable,
    PublishIncomplete,
    PublishStepError,
    ReleaseError,
    TarballBuildFailed,
    TarballNotProduced,
    UploadFailed,
)
from zrelease.release.gh import HostRelease, ReleaseHost, release_create_command
from zrelease.release.tools import ReleaseTools
from zrelease.release.version import ReleaseVersion

NOTES_FILE_NAME = "release-notes.md"


@dataclass(frozen=True, slots=True)
class PublishPlan:
    version: ReleaseVersion
    branch: str
    remote: str
    notes: str


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    version: str
    branch: str
    remote: str
    tarball: Path
    url: str
    notes: str


def make_output_dir() -> Path:
    return Path(tempfile.mkdtemp(prefix="zulip-release-"))


def resolve_remote(repo: Repository, config: ReleaseConfig) -> str:
    """Remote named by `git config zulip.zulipRemote`, else the default."""
    return repo.config_value(config.remote_config_key) or config.default_remote


def push_refspecs(plan: PublishPlan) -> tuple[str, str]:
    return (plan.branch, plan.version.tag)


def planned_commands(plan: PublishPlan, config: ReleaseConfig) -> list[list[str]]:
    """The side effects of `publish`, as the commands it will run."""
    version = plan.version
    output_dir = Path("$OUTPUT_DIR")
    tarball = output_dir / version.tarball_name
    release = HostRelease(
        tag=version.tag,
        title=version.release_title,
        notes_file=output_dir / NOTES_FILE_NAME,
        prerelease=version.is_prerelease,
        assets=(tarball,),
    )
    return [
        ["git", "tag", version.tag],
        [*config.tools.build_tarball, version.text],
        [*config.tools.upload, str(tarball)],
        ["git", "push", plan.remote, *push_refspecs(plan)],
        release_create_command(release),
    ]


def _incomplete(cause: PublishStepError, done: list[str]) -> Err[ReleaseError]:
    return Err(PublishIncomplete(cause=cause, done=tuple(done)))


def publish(
    *,
    plan: PublishPlan,
    repo: Repository,
    tools: ReleaseTools,
    host: ReleaseHost,
    console: ConsoleProtocol,
    output_dir_factory: Callable[[], Path] = make_output_dir,
) -> Result[PublishedRelease, ReleaseError]:
    version = plan.version

    # Everything that can fail without touching the repository happens first.
    try:
        output_dir = output_dir_factory()
        notes_file = output_dir / NOTES_FILE_NAME
        notes_file.write_text(plan.notes, encoding="utf-8")
    except OSError as e:
        return Err(OutputDirUnavailable(reason=str(e)))

    console.header(f"Tagging {version.tag}")
    console.command(["git", "tag", version.tag])
    tagged = repo.create_tag(version.tag)
    if isinstance(tagged, Err):
        return Err(GitCommandFailed(command=tagged.error.command, message=tagged.error.message))
    done = [f"created tag {version.tag}"]

    console.header("Building tarball")
    built = tools.build_tarball(version.text, output_dir)
    if isinstance(built, Err):
        return _incomplete(TarballBuildFailed(returncode=built.error.returncode), done)
    tarball = output_dir / version.tarball_name
    if not tarball.is_file():
        return _incomplete(TarballNotProduced(path=tarball), done)
    console.success(f"built {tarball}")
    done.append(f"built {tarball}")

    console.header("Uploading tarball")
    uploaded = tools.upload(tarball)
    if isinstance(uploaded, Err):
        return _incomplete(UploadFailed(tarball=tarball, returncode=uploaded.error.returncode), done)
    done.append(f"uploaded {tarball.name}")

    console.header(f"Pushing to {plan.remote}")
    refspecs = push_refspecs(plan)
    console.command(["git", "push", plan.remote, *refspecs])
    pushed = repo.push(plan.remote, *refspecs)
    if isinstance(pushed, Err):
        return _incomplete(
            GitCommandFailed(command=pushed.error.command, message=pushed.error.message), done
        )
    done.append(f"pushed {' '.join(refspecs)} to {plan.remote}")

    console.header("Creating GitHub release")
    created = host.create_release(
        HostRelease(
            tag=version.tag,
            title=version.release_title,
            notes_file=notes_file,
            prerelease=version.is_prerelease,
            assets=(tarball,),
        )
    )
    if isinstance(created, Err):
        return _incomplete(created.error, done)

    return Ok(
        PublishedRelease(
            version=version.text,
            branch=plan.branch,
            remote=plan.remote,
            tarball=tarball,
            url=created.value,
            notes=plan.notes,
        )
    )
