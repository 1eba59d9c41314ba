"""GitHub Actions run context.

The triggering repository, ref and commit come from the workflow
environment. Each value can be overridden explicitly (CLI flags, tests).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .config import ConfigError
from .result import Err, Ok, Result

__all__ = ["GitHubContext", "load_github_context"]

_HEADS_PREFIX = "refs/heads/"


@dataclass(frozen=True, slots=True)
class GitHubContext:
    """Where the run was triggered.

    Attributes:
        repo: Repository slug in "owner/name" format
        ref: Full git ref (e.g. "refs/heads/main")
        sha: Commit that triggered the run
        token: Token forwarded to gh (None uses gh's own auth)
    """

    repo: str
    ref: str
    sha: str
    token: str | None = None

    @property
    def branch(self) -> str:
        """Branch name with the refs/heads/ prefix removed."""
        return self.ref.replace(_HEADS_PREFIX, "", 1)


def load_github_context(
    env: Mapping[str, str] | None = None,
    *,
    repo: str | None = None,
    ref: str | None = None,
    sha: str | None = None,
    token: str | None = None,
) -> Result[GitHubContext, ConfigError]:
    """Resolve the run context from overrides, falling back to the environment."""
    source = os.environ if env is None else env

    resolved_repo = repo or source.get("GITHUB_REPOSITORY", "").strip()
    resolved_ref = ref or source.get("GITHUB_REF", "").strip()
    resolved_sha = sha or source.get("GITHUB_SHA", "").strip()
    resolved_token = token or source.get("GITHUB_TOKEN") or source.get("GH_TOKEN") or None

    missing = [
        name
        for name, value in (
            ("GITHUB_REPOSITORY", resolved_repo),
            ("GITHUB_REF", resolved_ref),
            ("GITHUB_SHA", resolved_sha),
        )
        if not value
    ]
    if missing:
        return Err(ConfigError(f"missing run context: {', '.join(missing)}"))

    if resolved_repo.count("/") != 1:
        return Err(ConfigError(f"invalid repository slug (expected owner/name): {resolved_repo}"))

    return Ok(
        GitHubContext(
            repo=resolved_repo,
            ref=resolved_ref,
            sha=resolved_sha,
            token=resolved_token,
        )
    )
