"""Typed configuration loading and access.

Configuration lives in an optional ``release-pr.toml`` at the project root.
Every key has a default, so a repository without the file behaves like the
stock changesets release flow.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigError",
    "GitConfig",
    "HistoryConfig",
    "PublishConfig",
    "VersionConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "release-pr.toml"

DEFAULT_PR_TITLE = "Version Packages"
DEFAULT_COMMIT_MESSAGE = "Version Packages"
DEFAULT_BRANCH_PREFIX = "changeset-release/"
DEFAULT_GIT_USER_NAME = "github-actions[bot]"
DEFAULT_GIT_USER_EMAIL = "github-actions[bot]@users.noreply.github.com"

# Shallow clones are deepened in steps of this many commits.
DEFAULT_DEEPEN_BY = 50
# 200 rounds of 50 commits: the search gives up after 10k extra commits.
DEFAULT_MAX_DEEPEN_ROUNDS = 200


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class VersionConfig:
    """Settings for the versioning PR run."""

    script: str | None = None
    pr_title: str = DEFAULT_PR_TITLE
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    # The root CHANGELOG.md is regenerated every run and is not committed.
    discard_root_changelog: bool = True


@dataclass(frozen=True, slots=True)
class PublishConfig:
    # Without a script, merging the versioning PR does not publish.
    script: str | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    user_name: str = DEFAULT_GIT_USER_NAME
    user_email: str = DEFAULT_GIT_USER_EMAIL


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Shallow clone deepening policy for the changeset commit search."""

    deepen_by: int = DEFAULT_DEEPEN_BY
    max_deepen_rounds: int = DEFAULT_MAX_DEEPEN_ROUNDS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    version: VersionConfig = field(default_factory=VersionConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    git: GitConfig = field(default_factory=GitConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        version: StrDict = get_table(data, "version") or {}
        publish: StrDict = get_table(data, "publish") or {}
        git: StrDict = get_table(data, "git") or {}
        history: StrDict = get_table(data, "history") or {}

        deepen_by = get_int(history, "deepen_by")
        if deepen_by is not None and deepen_by <= 0:
            raise ValueError("history.deepen_by must be positive")
        max_rounds = get_int(history, "max_deepen_rounds")
        if max_rounds is not None and max_rounds < 0:
            raise ValueError("history.max_deepen_rounds must not be negative")

        discard = get_bool(version, "discard_root_changelog")

        return cls(
            version=VersionConfig(
                script=get_str(version, "script"),
                pr_title=get_str(version, "pr_title") or DEFAULT_PR_TITLE,
                commit_message=get_str(version, "commit_message") or DEFAULT_COMMIT_MESSAGE,
                branch_prefix=get_str(version, "branch_prefix") or DEFAULT_BRANCH_PREFIX,
                discard_root_changelog=True if discard is None else discard,
            ),
            publish=PublishConfig(
                script=get_str(publish, "script"),
            ),
            git=GitConfig(
                user_name=get_str(git, "user_name") or DEFAULT_GIT_USER_NAME,
                user_email=get_str(git, "user_email") or DEFAULT_GIT_USER_EMAIL,
            ),
            history=HistoryConfig(
                deepen_by=deepen_by or DEFAULT_DEEPEN_BY,
                max_deepen_rounds=DEFAULT_MAX_DEEPEN_ROUNDS if max_rounds is None else max_rounds,
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


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to release-pr.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(project_root: Path) -> Result[Config, ConfigError]:
    """Load ``release-pr.toml`` from project_root, or defaults when absent.

    A present but broken file is still an error.
    """
    path = project_root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
