from __future__ import annotations

from pathlib import Path

import typer

from relpr.cli.context import build_context
from relpr.core.errors import ErrorCode
from relpr.core.result import Err
from relpr.git.repository import Repository
from relpr.output.console import Style


def setup_git(
    cwd: Path | None = typer.Option(None, "--cwd", help="Project root (defaults to the current directory)"),
) -> None:
    """Configure the bot committer identity ([git] in release-pr.toml)."""
    cli = build_context(cwd)
    git = cli.config.git

    result = Repository(cli.project_root).configure_identity(git.user_name, git.user_email)
    if isinstance(result, Err):
        cli.console.error(f"git {result.error.command} failed")
        cli.console.print(f"hint: {result.error.message}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.REMOTE_ERROR))

    cli.console.success(f"git identity: {git.user_name} <{git.user_email}>")
