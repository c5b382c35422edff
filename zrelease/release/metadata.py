"""Changelog and version.py consistency checks.

Before anything is tagged, the release commit has to agree with itself:

- the changelog has a `### <version> -- <YYYY-MM-DD>` heading dated today
  (in the release timezone, US Pacific by default);
- version.py names the version in `ZULIP_VERSION` (and in
  `LATEST_RELEASE_VERSION` unless it is a prerelease);
- a major release also sets `LATEST_MAJOR_VERSION`, bumps
  `API_FEATURE_LEVEL` in the release commit, and documents that level in
  the API changelog.

version.py is read as text rather than imported, so a checkout with a
broken or unrelated Python environment can still be checked.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from zrelease.core.config import ReleaseConfig
from zrelease.core.result import Err, Ok, Result
from zrelease.git.repository import Repository
from zrelease.output.console import ConsoleProtocol
from zrelease.release.errors import (
    ChangelogDateMismatch,
    ChangelogEntryMissing,
    FeatureLevelUndocumented,
    FileUnreadable,
    GitCommandFailed,
    MissingFeatureLevelBump,
    ReleaseError,
    SettingNotFound,
    VersionFieldMismatch,
)
from zrelease.release.version import ReleaseVersion

FEATURE_LEVEL_SETTING = "API_FEATURE_LEVEL"


def read_text(path: Path) -> Result[str, FileUnreadable]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(FileUnreadable(path=path, reason="file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(FileUnreadable(path=path, reason=str(e)))


def expected_changelog_date(timezone: str, now: datetime | None = None) -> str:
    """Today's date in `timezone` as YYYY-MM-DD.

    `now` must be timezone-aware when given.
    """
    tz = ZoneInfo(timezone)
    moment = now.astimezone(tz) if now is not None else datetime.now(tz)
    return moment.date().isoformat()


def find_changelog_date(changelog: str, version: str) -> str | None:
    """Date from the `### <version> -- <date>` heading, or None."""
    m = re.search(rf"^### {re.escape(version)} -- (\S+)[ \t]*$", changelog, re.MULTILINE)
    return m.group(1) if m else None


def read_setting(text: str, setting: str) -> str | None:
    """Value of a top-level `SETTING = "value"` or `SETTING = value` line."""
    m = re.search(
        rf'^{re.escape(setting)} = (?:"([^"\n]*)"|([^\s"#]+))[ \t]*(?:#.*)?$',
        text,
        re.MULTILINE,
    )
    if m is None:
        return None
    return m.group(1) if m.group(1) is not None else m.group(2)


def feature_level_bumped(diff: str) -> bool:
    """True if the diff adds a new `API_FEATURE_LEVEL = ...` assignment."""
    prefix = f"+{FEATURE_LEVEL_SETTING} = "
    return any(line.startswith(prefix) for line in diff.splitlines())


def feature_level_documented(api_changelog: str, feature_level: str) -> bool:
    marker = f"**Feature level {feature_level}**"
    return any(line.strip() == marker for line in api_changelog.splitlines())


def check_changelog_date(
    *,
    changelog: str,
    path: Path,
    version: ReleaseVersion,
    expected_date: str,
    timezone: str,
) -> Result[None, ReleaseError]:
    found = find_changelog_date(changelog, version.text)
    if found is None:
        return Err(ChangelogEntryMissing(version=version.text, path=path))
    if found != expected_date:
        return Err(
            ChangelogDateMismatch(
                version=version.text,
                found=found,
                expected=expected_date,
                timezone=timezone,
            )
        )
    return Ok(None)


def _require_setting(text: str, setting: str, path: Path) -> Result[str, ReleaseError]:
    value = read_setting(text, setting)
    if value is None:
        return Err(SettingNotFound(setting=setting, path=path))
    return Ok(value)


def check_version_fields(
    *, version_py: str, path: Path, version: ReleaseVersion
) -> Result[None, ReleaseError]:
    settings = ["ZULIP_VERSION"]
    if not version.is_prerelease:
        settings.append("LATEST_RELEASE_VERSION")
    if version.is_major_release:
        settings.append("LATEST_MAJOR_VERSION")

    for setting in settings:
        value = _require_setting(version_py, setting, path)
        if isinstance(value, Err):
            return value
        if value.value != version.text:
            return Err(
                VersionFieldMismatch(setting=setting, found=value.value, expected=version.text)
            )
    return Ok(None)


def check_feature_level(
    *,
    config: ReleaseConfig,
    repo: Repository,
    version_py: str,
) -> Result[str, ReleaseError]:
    """Verify the feature level bump of a major release; returns the level."""
    diff = repo.diff_from_parent(config.version_file)
    if isinstance(diff, Err):
        return Err(GitCommandFailed(command=diff.error.command, message=diff.error.message))
    if not feature_level_bumped(diff.value):
        return Err(MissingFeatureLevelBump(path=config.version_file_path))

    level = _require_setting(version_py, FEATURE_LEVEL_SETTING, config.version_file_path)
    if isinstance(level, Err):
        return level

    api_changelog = read_text(config.api_changelog_file)
    if isinstance(api_changelog, Err):
        return api_changelog
    if not feature_level_documented(api_changelog.value, level.value):
        return Err(FeatureLevelUndocumented(feature_level=level.value, path=config.api_changelog_file))
    return Ok(level.value)


def check_release_metadata(
    *,
    config: ReleaseConfig,
    repo: Repository,
    version: ReleaseVersion,
    expected_date: str,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    """Run every metadata check; returns the changelog text for later extraction."""
    changelog = read_text(config.changelog_file)
    if isinstance(changelog, Err):
        return changelog

    dated = check_changelog_date(
        changelog=changelog.value,
        path=config.changelog_file,
        version=version,
        expected_date=expected_date,
        timezone=config.timezone,
    )
    if isinstance(dated, Err):
        return dated
    console.success(f"changelog entry: {version} -- {expected_date}")

    version_py = read_text(config.version_file_path)
    if isinstance(version_py, Err):
        return version_py

    fields = check_version_fields(
        version_py=version_py.value, path=config.version_file_path, version=version
    )
    if isinstance(fields, Err):
        return fields
    console.success(f"{config.version_file}: {version}")

    if version.is_major_release:
        level = check_feature_level(config=config, repo=repo, version_py=version_py.value)
        if isinstance(level, Err):
            return level
        console.success(f"feature level {level.value} bumped and documented")

    return Ok(changelog.value)
