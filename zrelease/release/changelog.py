"""Extract a version's section from the changelog for the GitHub release body.

The changelog (docs/overview/changelog.md) is organised like this:

    ## Zulip Server 9.x series

    ### 9.1 -- 2024-08-02

    - Fixed a bug ...

    #### Upgrade notes for 9.0

    ### 9.0 -- 2024-07-25

The section for `9.1` is everything after its heading up to the next heading
of level 1 to 3 that is about a different version. Deeper headings (`####`)
belong to the section. Lines tagged with the withholding marker `E0` are
internal notes that stay out of the public release notes.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

WITHHELD_MARKER = "E0"

_SECTION_HEADING_RE = re.compile(r"^#{1,3}(?:\s+(.*))?$")
_WITHHELD_RE = re.compile(rf"\b{WITHHELD_MARKER}\b")


def _names_version(heading_text: str, version: str) -> bool:
    return re.match(rf"{re.escape(version)}(?:\s|$)", heading_text) is not None


def is_version_heading(line: str, version: str) -> bool:
    """True for the `### <version> ...` line that opens the section."""
    return line.startswith("### ") and _names_version(line[4:], version)


def is_withheld(line: str) -> bool:
    return _WITHHELD_RE.search(line) is not None


def extract_release_notes(changelog: str, version: str) -> Iterator[str]:
    """Lazily yield the lines of `version`'s changelog section.

    The opening heading itself is not yielded. Yields nothing if the
    changelog has no section for `version`.
    """
    lines = iter(changelog.splitlines())

    for line in lines:
        if is_version_heading(line, version):
            break
    else:
        return

    for line in lines:
        m = _SECTION_HEADING_RE.match(line)
        if m is not None and not _names_version(m.group(1) or "", version):
            return
        if is_withheld(line):
            continue
        yield line


def release_notes(changelog: str, version: str) -> str:
    """The section for `version` as text, without surrounding blank lines."""
    lines = list(extract_release_notes(changelog, version))
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
