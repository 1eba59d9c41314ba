from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from relpr.core.config import ConfigError
from relpr.git.repository import GitError

ReleaseErrorKind = Literal[
    "parse_error",
    "config_error",
    "lookup_error",
    "io_error",
    "git_failed",
    "host_failed",
    "tool_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None


def from_git_error(error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"git {error.command} failed", hint=error.message)


def from_config_error(error: ConfigError) -> ReleaseError:
    hint = str(error.path) if error.path is not None else None
    return ReleaseError(kind="config_error", message=error.message, hint=hint)
