from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TypeVar

import typer

from relpr.cli.commands._helpers import exit_on_error
from relpr.core.config import Config, ConfigError, load_config_or_default
from relpr.core.errors import ErrorCode
from relpr.core.github import GitHubContext, load_github_context
from relpr.core.result import Result
from relpr.git.repository import Repository
from relpr.output.console import ConsoleProtocol, RichConsole
from relpr.services.release.errors import ReleaseError, from_config_error
from relpr.services.release.host import GhReleaseHost
from relpr.services.release.orchestrator import ReleaseContext

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    config: Config
    console: ConsoleProtocol


def _resolve_root(cwd: Path | None) -> Path:
    try:
        return (cwd or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --cwd: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def _release_result(result: Result[T, ConfigError]) -> Result[T, ReleaseError]:
    return result.map_err(from_config_error)


def build_context(cwd: Path | None = None) -> CLIContext:
    root = _resolve_root(cwd)
    if not root.is_dir():
        typer.echo(f"error: not a directory: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    console = RichConsole()
    config = exit_on_error(_release_result(load_config_or_default(root)), console)
    return CLIContext(project_root=root, config=config, console=console)


def build_release_context(
    cli: CLIContext,
    *,
    repo: str | None = None,
    ref: str | None = None,
    sha: str | None = None,
    version_script: str | None = None,
    publish_script: str | None = None,
) -> ReleaseContext:
    """Wire the real git clone and gh host around the loaded config.

    Scripts given on the command line replace the configured ones.
    """
    github: GitHubContext = exit_on_error(
        _release_result(load_github_context(repo=repo, ref=ref, sha=sha)),
        cli.console,
    )

    config = cli.config
    if version_script is not None:
        config = replace(config, version=replace(config.version, script=version_script))
    if publish_script is not None:
        config = replace(config, publish=replace(config.publish, script=publish_script))

    return ReleaseContext(
        project_root=cli.project_root,
        github=github,
        config=config,
        repo=Repository(cli.project_root),
        host=GhReleaseHost(repo=github.repo, cwd=cli.project_root, token=github.token),
        console=cli.console,
    )
