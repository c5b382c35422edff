"""Tests for zrelease.platform.process module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from zrelease.core.result import Err, Ok
from zrelease.platform.process import ProcessError, run, run_silent

PY = sys.executable


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("gh", "release", "create", "9.0", "--title", "Zulip Server 9.0"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "gh release create ... failed (exit 1)"

    def test_output_joins_streams(self) -> None:
        error = ProcessError(("provision",), 1, "installing\n", "failed\n")
        assert error.output == "installing\nfailed"

    def test_output_skips_empty_streams(self) -> None:
        assert ProcessError(("x",), 1, "", "only stderr\n").output == "only stderr"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_captures_stderr(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(1)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert "error msg" in result.error.stderr

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "test.txt").write_text("content")

        result = run([PY, "-c", "import os; print(os.listdir('.'))"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "test.txt" in result.value

    def test_uses_env(self, tmp_path: Path) -> None:
        env = os.environ.copy()
        env["OUTPUT_DIR"] = "/tmp/zulip-release-x"

        result = run(
            [PY, "-c", "import os; print(os.environ.get('OUTPUT_DIR', ''))"],
            cwd=tmp_path,
            env=env,
        )

        assert isinstance(result, Ok)
        assert "/tmp/zulip-release-x" in result.value

    def test_timeout(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import time; time.sleep(10)"],
            cwd=tmp_path,
            timeout=0.1,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr.lower()


class TestRunSilent:
    """Test run_silent function."""

    def test_success_returns_none(self, tmp_path: Path) -> None:
        result = run_silent([PY, "-c", "pass"], cwd=tmp_path, timeout=10.0)

        assert isinstance(result, Ok)
        assert result.value is None

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run_silent(
            [PY, "-c", "import sys; sys.exit(3)"],
            cwd=tmp_path,
            timeout=10.0,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.command[1:] == ("-c", "import sys; sys.exit(3)")

    def test_timeout_returns_error(self, tmp_path: Path) -> None:
        result = run_silent(
            [PY, "-c", "import time; time.sleep(10)"],
            cwd=tmp_path,
            timeout=0.1,
        )

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr.lower()

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run_silent(["nonexistent_command_12345"], cwd=tmp_path, timeout=1.0)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
