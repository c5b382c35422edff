"""Cut a Zulip Server release from the current checkout.

The run is a straight line of fail-fast checks followed by the publish
steps. Checks, in order:

1. version format and branch
2. clean working tree and "Release Zulip Server X.Y." HEAD commit
3. provision, changelog lint, documentation links, changelog spelling
4. changelog date and version.py fields (plus feature level for X.0)
5. gh authentication

Then, after the confirmation delay: tag, tarball, upload, push, GitHub
release. A dry run stops after printing the publish plan.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from zrelease.core.config import ReleaseConfig
from zrelease.core.result import Err, Ok, Result
from zrelease.git.repository import Repository
from zrelease.output.console import ConsoleProtocol, Style
from zrelease.release.changelog import release_notes
from zrelease.release.delay import Delay
from zrelease.release.errors import GitCommandFailed, ReleaseError
from zrelease.release.gates import run_quality_gates
from zrelease.release.gh import ReleaseHost
from zrelease.release.metadata import check_release_metadata, expected_changelog_date
from zrelease.release.publish import (
    PublishedRelease,
    PublishPlan,
    make_output_dir,
    planned_commands,
    publish,
    resolve_remote,
)
from zrelease.release.repo_state import check_repository_state
from zrelease.release.tools import ReleaseTools
from zrelease.release.version import ReleaseVersion, parse_version, validate_branch


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    version: str
    dry_run: bool = False
    delay_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    plan: PublishPlan
    published: PublishedRelease | None


def check_version_and_branch(
    *, version_text: str, repo: Repository, console: ConsoleProtocol
) -> Result[tuple[ReleaseVersion, str], ReleaseError]:
    parsed = parse_version(version_text)
    if isinstance(parsed, Err):
        return parsed
    version = parsed.value

    branch = repo.current_branch()
    if isinstance(branch, Err):
        return Err(GitCommandFailed(command=branch.error.command, message=branch.error.message))

    valid = validate_branch(version, branch.value)
    if isinstance(valid, Err):
        return valid

    kind = "major release" if version.is_major_release else "release"
    if version.is_prerelease:
        kind = "prerelease"
    console.success(f"{kind} {version} from {branch.value}")
    return Ok((version, branch.value))


def _print_plan(console: ConsoleProtocol, plan: PublishPlan, config: ReleaseConfig) -> None:
    console.header("Publish plan")
    for cmd in planned_commands(plan, config):
        console.command(cmd)
    console.newline()
    console.print(f"Release notes for {plan.version}:", Style.BOLD)
    console.print(plan.notes.rstrip() or "(empty)", Style.DIM)


def run_release(
    *,
    request: ReleaseRequest,
    config: ReleaseConfig,
    repo: Repository,
    tools: ReleaseTools,
    host: ReleaseHost,
    delay: Delay,
    console: ConsoleProtocol,
    now: datetime | None = None,
    output_dir_factory: Callable[[], Path] = make_output_dir,
) -> Result[ReleaseOutcome, ReleaseError]:
    console.header(f"Release Zulip Server {request.version}")
    checked = check_version_and_branch(version_text=request.version, repo=repo, console=console)
    if isinstance(checked, Err):
        return checked
    version, branch = checked.value

    state = check_repository_state(repo, version)
    if isinstance(state, Err):
        return state
    console.success(f"clean tree at {version.commit_message!r}")

    console.header("Quality gates")
    gates = run_quality_gates(config=config, tools=tools, console=console)
    if isinstance(gates, Err):
        return gates

    console.header("Release metadata")
    changelog = check_release_metadata(
        config=config,
        repo=repo,
        version=version,
        expected_date=expected_changelog_date(config.timezone, now),
        console=console,
    )
    if isinstance(changelog, Err):
        return changelog

    console.header("GitHub")
    ready = host.ensure_ready()
    if isinstance(ready, Err):
        return ready
    console.success("gh authenticated")

    notes = release_notes(changelog.value, version.text)
    if not notes:
        console.warning(f"changelog section for {version} is empty")

    plan = PublishPlan(
        version=version,
        branch=branch,
        remote=resolve_remote(repo, config),
        notes=notes,
    )
    _print_plan(console, plan, config)

    if request.dry_run:
        console.info("dry run: nothing was tagged, pushed or published")
        return Ok(ReleaseOutcome(plan=plan, published=None))

    seconds = (
        request.delay_seconds if request.delay_seconds is not None else config.confirm_delay_seconds
    )
    waited = delay.wait(seconds)
    if isinstance(waited, Err):
        return waited

    published = publish(
        plan=plan,
        repo=repo,
        tools=tools,
        host=host,
        console=console,
        output_dir_factory=output_dir_factory,
    )
    if isinstance(published, Err):
        return published
    return Ok(ReleaseOutcome(plan=plan, published=published.value))
