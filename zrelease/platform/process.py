"""Subprocess execution with Result-based error handling.

This is the only module that talks to `subprocess` directly. Everything else
(git, gh, the zulip tools/ scripts) goes through `run` or `run_silent`.

Usage:
    result = run(["git", "rev-parse", "HEAD"], cwd=repo_root)
    match result:
        case Ok(stdout):
            print(stdout.strip())
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from zrelease.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran or timed out).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for surfacing a tool's log."""
        return "\n".join(part for part in (self.stdout.rstrip(), self.stderr.rstrip()) if part)


def _timeout_text(value: str | bytes | None) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value or ""


def _spawn(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None,
    timeout: float | None,
    *,
    capture: bool,
) -> Result[tuple[str, str], ProcessError]:
    """Run `cmd` to completion; Ok carries (stdout, stderr) when captured."""
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        stdout = _timeout_text(e.stdout) if capture else ""
        return Err(ProcessError(command, -1, stdout, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, "", str(e)))

    stdout = proc.stdout or ""
    stderr = proc.stderr or ""
    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, stdout, stderr))
    return Ok((stdout, stderr))


def run(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout or a ProcessError.

    Output is captured, so nothing reaches the terminal. Use this for
    queries (git status, gh auth status) and for tools whose log is only
    interesting when they fail.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment for the child (inherits ours if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    return _spawn(cmd, cwd, env, timeout, capture=True).map(lambda out: out[0])


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Execute a command whose output streams straight to the terminal.

    Used for the lint/doc/spelling gates and the tarball build so the
    operator sees progress and diagnostics as they happen. The returned
    ProcessError therefore has empty stdout and stderr.
    """
    return _spawn(cmd, cwd, env, timeout, capture=False).map(lambda _: None)
