"""Tests for release/tools.py: how the zulip tools/ scripts are invoked."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

from zrelease.core.config import ToolCommands
from zrelease.core.result import Err, Ok, Result
from zrelease.output.console import MockConsole
from zrelease.platform.process import ProcessError
from zrelease.release import tools as tools_mod
from zrelease.release.tools import OUTPUT_DIR_ENV_VAR, SubprocessTools


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], Path, dict[str, str]]] = []

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del timeout
        self.calls.append(("run", cmd, cwd, dict(env or {})))
        return Ok("provisioned\n")

    def run_silent(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[None, ProcessError]:
        del timeout
        self.calls.append(("run_silent", cmd, cwd, dict(env or {})))
        return Ok(None)


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> _Recorder:
    rec = _Recorder()
    monkeypatch.setattr(tools_mod, "run", rec.run)
    monkeypatch.setattr(tools_mod, "run_silent", rec.run_silent)
    return rec


def _tools(root: Path, console: MockConsole | None = None) -> SubprocessTools:
    return SubprocessTools(
        repo_root=root,
        commands=ToolCommands(),
        console=console or MockConsole(),
        env={"PATH": "/usr/bin"},
    )


def test_provision_output_is_captured(tmp_path: Path, recorder: _Recorder) -> None:
    assert _tools(tmp_path).provision() == Ok(None)
    assert recorder.calls == [("run", ["./tools/provision"], tmp_path, {"PATH": "/usr/bin"})]


def test_gates_stream_from_repo_root(tmp_path: Path, recorder: _Recorder) -> None:
    console = MockConsole()
    tools = _tools(tmp_path, console)

    tools.lint_changelog("docs/overview/changelog.md")
    tools.check_doc_links()
    tools.spellcheck("docs/overview/changelog.md")

    assert [(kind, cmd) for kind, cmd, _, _ in recorder.calls] == [
        ("run_silent", ["./tools/lint", "--groups=docs", "docs/overview/changelog.md"]),
        ("run_silent", ["./tools/test-documentation", "--skip-external-links"]),
        ("run_silent", ["./tools/run-codespell", "docs/overview/changelog.md"]),
    ]
    assert all(cwd == tmp_path for _, _, cwd, _ in recorder.calls)
    assert console.commands[1] == "./tools/test-documentation --skip-external-links"


def test_build_tarball_sets_output_dir(tmp_path: Path, recorder: _Recorder) -> None:
    out = tmp_path / "out"

    _tools(tmp_path).build_tarball("9.1", out)

    _, cmd, _, env = recorder.calls[0]
    assert cmd == ["./tools/build-release-tarball", "9.1"]
    assert env[OUTPUT_DIR_ENV_VAR] == str(out)
    assert env["PATH"] == "/usr/bin"


def test_upload_passes_tarball_path(tmp_path: Path, recorder: _Recorder) -> None:
    tarball = tmp_path / "zulip-server-9.1.tar.gz"

    _tools(tmp_path).upload(tarball)

    assert recorder.calls[0][1] == ["./tools/upload-release", str(tarball)]


def test_failure_is_passed_through(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    error = ProcessError(("./tools/lint",), 1, "", "")

    def failing(cmd: list[str], cwd: Path, env: Mapping[str, str] | None = None, *, timeout: float | None = None):
        del cmd, cwd, env, timeout
        return Err(error)

    monkeypatch.setattr(tools_mod, "run_silent", failing)

    assert _tools(tmp_path).lint_changelog("CHANGELOG.md") == Err(error)
