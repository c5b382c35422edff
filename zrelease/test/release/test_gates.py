"""Tests for release/gates.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from zrelease.core.config import ReleaseConfig
from zrelease.core.result import Err, Ok
from zrelease.output.console import MockConsole
from zrelease.release.errors import (
    LinkValidationFailed,
    LintFailed,
    ProvisioningFailed,
    SpellcheckFailed,
)
from zrelease.release.gates import run_quality_gates
from zrelease.test.fakes import FakeTools, process_error

ALL_GATES = ["provision", "lint_changelog", "check_doc_links", "spellcheck"]


def test_all_gates_pass_in_order(tmp_path: Path) -> None:
    tools = FakeTools()
    console = MockConsole()

    result = run_quality_gates(config=ReleaseConfig(repo_root=tmp_path), tools=tools, console=console)

    assert result == Ok(None)
    assert tools.calls == ALL_GATES
    assert console.messages == ["OK provision", "OK lint", "OK documentation links", "OK spelling"]


def test_provision_failure_keeps_log(tmp_path: Path) -> None:
    tools = FakeTools(
        failures={"provision": process_error("./tools/provision", 1, stdout="step 1\n", stderr="boom\n")}
    )

    result = run_quality_gates(
        config=ReleaseConfig(repo_root=tmp_path), tools=tools, console=MockConsole()
    )

    assert result == Err(ProvisioningFailed(returncode=1, log="step 1\nboom"))
    assert tools.calls == ["provision"]


@pytest.mark.parametrize(
    ("gate", "expected"),
    [
        ("lint_changelog", LintFailed(returncode=2)),
        ("check_doc_links", LinkValidationFailed(returncode=2)),
        ("spellcheck", SpellcheckFailed(returncode=2)),
    ],
)
def test_first_failure_stops_the_run(tmp_path: Path, gate: str, expected: object) -> None:
    tools = FakeTools(failures={gate: process_error(gate, 2)})

    result = run_quality_gates(
        config=ReleaseConfig(repo_root=tmp_path), tools=tools, console=MockConsole()
    )

    assert result == Err(expected)
    assert tools.calls == ALL_GATES[: ALL_GATES.index(gate) + 1]
