from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from zrelease.core.config import (
    CONFIG_FILE_NAME,
    ReleaseConfig,
    load_config,
    load_config_or_default,
    with_env_overrides,
)
from zrelease.core.errors import ErrorCode
from zrelease.core.result import Err
from zrelease.git.repository import Repository
from zrelease.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: Repository
    config: ReleaseConfig
    console: ConsoleProtocol


def find_repo_root(start: Path) -> Path | None:
    """Nearest directory at or above `start` that is a git checkout."""
    for parent in (start, *start.parents):
        if (parent / ".git").exists():
            return parent
    return None


def build_context(*, repo: Path | None, config_file: Path | None) -> CLIContext:
    console = RichConsole()

    start = (repo or Path.cwd()).expanduser().resolve()
    root = find_repo_root(start)
    if root is None:
        typer.echo(f"error: not inside a git checkout: {start}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    if config_file is not None:
        loaded = load_config(config_file.expanduser(), repo_root=root)
    else:
        loaded = load_config_or_default(root / CONFIG_FILE_NAME, repo_root=root)
    if isinstance(loaded, Err):
        typer.echo(f"error: {loaded.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = with_env_overrides(loaded.value, os.environ)
    if isinstance(config, Err):
        typer.echo(f"error: {config.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(repo=Repository(root), config=config.value, console=console)
