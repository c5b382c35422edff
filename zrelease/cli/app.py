from __future__ import annotations

import os
from pathlib import Path

import typer

from zrelease.cli.context import build_context
from zrelease.core.result import Err
from zrelease.output.errors import print_release_error, release_error_exit_code
from zrelease.release.delay import CountdownDelay
from zrelease.release.gh import GhCli
from zrelease.release.orchestrator import ReleaseRequest, run_release
from zrelease.release.tools import SubprocessTools


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


@app.command()
def release(
    version: str = typer.Argument(..., help="Version to release, e.g. 9.0, 9.3 or 10.0-beta1."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Path inside the zulip checkout (default: current directory).",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: .zrelease.toml at the repository root, if present).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Run every check and print the publish plan without tagging or pushing.",
    ),
    delay: float | None = typer.Option(
        None,
        "--delay",
        min=0,
        help="Seconds to wait before tagging (default from config: 15).",
    ),
) -> None:
    """Check, tag and publish a Zulip Server release."""
    ctx = build_context(repo=repo, config_file=config_file)
    root = ctx.repo.path

    result = run_release(
        request=ReleaseRequest(version=version, dry_run=dry_run, delay_seconds=delay),
        config=ctx.config,
        repo=ctx.repo,
        tools=SubprocessTools(
            repo_root=root,
            commands=ctx.config.tools,
            console=ctx.console,
            env=os.environ,
        ),
        host=GhCli(repo_root=root, console=ctx.console),
        delay=CountdownDelay(console=ctx.console),
        console=ctx.console,
    )
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    published = result.value.published
    if published is not None:
        ctx.console.success(f"released Zulip Server {published.version}")
        if published.url:
            ctx.console.print(published.url)


def main() -> None:
    app()
