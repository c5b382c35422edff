"""`zrelease-notes VERSION`: print the public release notes for a version.

Handy for previewing what `zrelease` will put in the GitHub release, or for
pasting into an announcement. Only the version format is checked.
"""

from __future__ import annotations

from pathlib import Path

import typer

from zrelease.cli.context import build_context
from zrelease.core.errors import ErrorCode
from zrelease.core.result import Err
from zrelease.output.errors import print_release_error, release_error_exit_code
from zrelease.release.changelog import release_notes
from zrelease.release.metadata import read_text
from zrelease.release.version import parse_version


notes_app = typer.Typer(add_completion=False)


@notes_app.command()
def notes(
    version: str = typer.Argument(..., help="Version whose changelog section to print."),
    repo: Path | None = typer.Option(None, "--repo", help="Path inside the zulip checkout."),
    config_file: Path | None = typer.Option(None, "--config", help="Config file."),
) -> None:
    ctx = build_context(repo=repo, config_file=config_file)

    parsed = parse_version(version)
    if isinstance(parsed, Err):
        print_release_error(parsed.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(parsed.error))

    changelog = read_text(ctx.config.changelog_file)
    if isinstance(changelog, Err):
        print_release_error(changelog.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(changelog.error))

    text = release_notes(changelog.value, parsed.value.text)
    if not text:
        ctx.console.error(f"no changelog section for {version} in {ctx.config.changelog_path}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    # Plain echo, not the console: the output is meant to be piped.
    typer.echo(text, nl=False)


def main() -> None:
    notes_app()
