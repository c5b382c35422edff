"""Typed release configuration.

Defaults describe the layout of a zulip/zulip checkout. An optional
`.zrelease.toml` at the repository root (or passed with --config) overrides
them:

    [paths]
    changelog = "docs/overview/changelog.md"
    version_file = "version.py"
    api_changelog = "api_docs/changelog.md"

    [release]
    timezone = "America/Los_Angeles"
    confirm_delay_seconds = 15
    remote_config_key = "zulip.zulipRemote"
    default_remote = "upstream"

    [tools]
    provision = ["./tools/provision"]
    lint = ["./tools/lint", "--groups=docs"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "ConfigError",
    "ReleaseConfig",
    "ToolCommands",
    "load_config",
    "load_config_or_default",
    "with_env_overrides",
    "CONFIG_FILE_NAME",
    "TIMEZONE_ENV_VAR",
]

CONFIG_FILE_NAME = ".zrelease.toml"
TIMEZONE_ENV_VAR = "ZRELEASE_TIMEZONE"

CHANGELOG_PATH = "docs/overview/changelog.md"
VERSION_FILE = "version.py"
API_CHANGELOG_PATH = "api_docs/changelog.md"

# Changelog dates are written in the release manager's calendar, not UTC.
RELEASE_TIMEZONE = "America/Los_Angeles"
CONFIRM_DELAY_SECONDS = 15.0
REMOTE_CONFIG_KEY = "zulip.zulipRemote"
DEFAULT_REMOTE = "upstream"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ToolCommands:
    """Command prefixes for the external collaborators.

    Arguments supplied at call time (changelog path, version, tarball path)
    are appended to these prefixes.
    """

    provision: tuple[str, ...] = ("./tools/provision",)
    lint: tuple[str, ...] = ("./tools/lint", "--groups=docs")
    doc_links: tuple[str, ...] = ("./tools/test-documentation", "--skip-external-links")
    spellcheck: tuple[str, ...] = ("./tools/run-codespell",)
    build_tarball: tuple[str, ...] = ("./tools/build-release-tarball",)
    upload: tuple[str, ...] = ("./tools/upload-release",)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything a release run needs to know about its surroundings."""

    repo_root: Path
    changelog_path: str = CHANGELOG_PATH
    version_file: str = VERSION_FILE
    api_changelog_path: str = API_CHANGELOG_PATH
    timezone: str = RELEASE_TIMEZONE
    confirm_delay_seconds: float = CONFIRM_DELAY_SECONDS
    remote_config_key: str = REMOTE_CONFIG_KEY
    default_remote: str = DEFAULT_REMOTE
    tools: ToolCommands = field(default_factory=ToolCommands)

    @property
    def changelog_file(self) -> Path:
        return self.repo_root / self.changelog_path

    @property
    def version_file_path(self) -> Path:
        return self.repo_root / self.version_file

    @property
    def api_changelog_file(self) -> Path:
        return self.repo_root / self.api_changelog_path

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, repo_root: Path) -> ReleaseConfig:
        """Create a config from a mapping (parsed TOML), falling back to defaults."""
        paths: StrDict = get_table(data, "paths") or {}
        release: StrDict = get_table(data, "release") or {}
        tools: StrDict = get_table(data, "tools") or {}
        defaults = ToolCommands()

        delay = release.get("confirm_delay_seconds", CONFIRM_DELAY_SECONDS)
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
            raise ValueError(f"confirm_delay_seconds must be a non-negative number: {delay!r}")

        return cls(
            repo_root=repo_root,
            changelog_path=get_str(paths, "changelog") or CHANGELOG_PATH,
            version_file=get_str(paths, "version_file") or VERSION_FILE,
            api_changelog_path=get_str(paths, "api_changelog") or API_CHANGELOG_PATH,
            timezone=get_str(release, "timezone") or RELEASE_TIMEZONE,
            confirm_delay_seconds=float(delay),
            remote_config_key=get_str(release, "remote_config_key") or REMOTE_CONFIG_KEY,
            default_remote=get_str(release, "default_remote") or DEFAULT_REMOTE,
            tools=ToolCommands(
                provision=get_str_list(tools, "provision") or defaults.provision,
                lint=get_str_list(tools, "lint") or defaults.lint,
                doc_links=get_str_list(tools, "doc_links") or defaults.doc_links,
                spellcheck=get_str_list(tools, "spellcheck") or defaults.spellcheck,
                build_tarball=get_str_list(tools, "build_tarball") or defaults.build_tarball,
                upload=get_str_list(tools, "upload") or defaults.upload,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _check_timezone(config: ReleaseConfig, path: Path | None) -> Result[ReleaseConfig, ConfigError]:
    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return Err(ConfigError(f"Unknown timezone: {config.timezone}", path=path))
    return Ok(config)


def load_config(path: Path, *, repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file
        repo_root: Root of the zulip checkout the paths are relative to

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = ReleaseConfig.from_dict(result.value, repo_root=repo_root)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
    return _check_timezone(config, path)


def load_config_or_default(path: Path, *, repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load config from file, or return the defaults if the file doesn't exist.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(ReleaseConfig(repo_root=repo_root))
    return load_config(path, repo_root=repo_root)


def with_env_overrides(
    config: ReleaseConfig, env: Mapping[str, str]
) -> Result[ReleaseConfig, ConfigError]:
    """Apply environment overrides; the environment is passed in, never read here."""
    tz = env.get(TIMEZONE_ENV_VAR, "").strip()
    if not tz:
        return Ok(config)
    return _check_timezone(replace(config, timezone=tz), None)
