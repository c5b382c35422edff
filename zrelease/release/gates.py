from __future__ import annotations

from zrelease.core.config import ReleaseConfig
from zrelease.core.result import Err, Ok, Result
from zrelease.output.console import ConsoleProtocol
from zrelease.release.errors import (
    LintFailed,
    LinkValidationFailed,
    ProvisioningFailed,
    ReleaseError,
    SpellcheckFailed,
)
from zrelease.release.tools import ReleaseTools


def run_quality_gates(
    *,
    config: ReleaseConfig,
    tools: ReleaseTools,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Provision, then lint, link-check and spellcheck the docs, in that order.

    The first failing gate aborts; nothing is retried.
    """
    provisioned = tools.provision()
    if isinstance(provisioned, Err):
        e = provisioned.error
        return Err(ProvisioningFailed(returncode=e.returncode, log=e.output))
    console.success("provision")

    linted = tools.lint_changelog(config.changelog_path)
    if isinstance(linted, Err):
        return Err(LintFailed(returncode=linted.error.returncode))
    console.success("lint")

    links = tools.check_doc_links()
    if isinstance(links, Err):
        return Err(LinkValidationFailed(returncode=links.error.returncode))
    console.success("documentation links")

    spelling = tools.spellcheck(config.changelog_path)
    if isinstance(spelling, Err):
        return Err(SpellcheckFailed(returncode=spelling.error.returncode))
    console.success("spelling")

    return Ok(None)
