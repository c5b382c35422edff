"""The zulip `tools/` scripts a release depends on.

The orchestrator only knows the `ReleaseTools` protocol. `SubprocessTools`
runs the real scripts from the checkout; tests substitute a fake.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from zrelease.core.config import ToolCommands
from zrelease.core.result import Result
from zrelease.output.console import ConsoleProtocol
from zrelease.platform.process import ProcessError, run, run_silent
from zrelease.release.timeouts import (
    BUILD_TIMEOUT_SECONDS,
    GATE_TIMEOUT_SECONDS,
    PROVISION_TIMEOUT_SECONDS,
    UPLOAD_TIMEOUT_SECONDS,
)

OUTPUT_DIR_ENV_VAR = "OUTPUT_DIR"


class ReleaseTools(Protocol):
    """External collaborators, each a blocking pass/fail call."""

    def provision(self) -> Result[None, ProcessError]:
        """Bring the development environment up to date; output is captured."""
        ...

    def lint_changelog(self, changelog: str) -> Result[None, ProcessError]: ...

    def check_doc_links(self) -> Result[None, ProcessError]:
        """Validate documentation links, skipping external ones."""
        ...

    def spellcheck(self, changelog: str) -> Result[None, ProcessError]: ...

    def build_tarball(self, version: str, output_dir: Path) -> Result[None, ProcessError]:
        """Build `zulip-server-<version>.tar.gz` into `output_dir`."""
        ...

    def upload(self, tarball: Path) -> Result[None, ProcessError]: ...


class SubprocessTools:
    """Runs the configured command prefixes from the repository root."""

    def __init__(
        self,
        *,
        repo_root: Path,
        commands: ToolCommands,
        console: ConsoleProtocol,
        env: Mapping[str, str],
    ) -> None:
        self._root = repo_root
        self._commands = commands
        self._console = console
        self._env = dict(env)

    def provision(self) -> Result[None, ProcessError]:
        cmd = list(self._commands.provision)
        self._console.command(cmd)
        return run(cmd, cwd=self._root, env=self._env, timeout=PROVISION_TIMEOUT_SECONDS).map(
            lambda _: None
        )

    def lint_changelog(self, changelog: str) -> Result[None, ProcessError]:
        return self._stream([*self._commands.lint, changelog], timeout=GATE_TIMEOUT_SECONDS)

    def check_doc_links(self) -> Result[None, ProcessError]:
        return self._stream(list(self._commands.doc_links), timeout=GATE_TIMEOUT_SECONDS)

    def spellcheck(self, changelog: str) -> Result[None, ProcessError]:
        return self._stream([*self._commands.spellcheck, changelog], timeout=GATE_TIMEOUT_SECONDS)

    def build_tarball(self, version: str, output_dir: Path) -> Result[None, ProcessError]:
        env = {**self._env, OUTPUT_DIR_ENV_VAR: str(output_dir)}
        return self._stream(
            [*self._commands.build_tarball, version], timeout=BUILD_TIMEOUT_SECONDS, env=env
        )

    def upload(self, tarball: Path) -> Result[None, ProcessError]:
        return self._stream([*self._commands.upload, str(tarball)], timeout=UPLOAD_TIMEOUT_SECONDS)

    def _stream(
        self,
        cmd: list[str],
        *,
        timeout: float,
        env: Mapping[str, str] | None = None,
    ) -> Result[None, ProcessError]:
        self._console.command(cmd)
        return run_silent(cmd, cwd=self._root, env=env or self._env, timeout=timeout)
