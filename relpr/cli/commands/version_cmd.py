from __future__ import annotations

from pathlib import Path

import typer

from relpr.cli.commands._helpers import exit_on_error
from relpr.cli.context import build_context, build_release_context
from relpr.output.console import Style
from relpr.services.release.orchestrator import run_version


def version(
    cwd: Path | None = typer.Option(None, "--cwd", help="Project root (defaults to the current directory)"),
    script: str | None = typer.Option(
        None,
        "--script",
        help="Versioning command (defaults to the installed changesets CLI)",
    ),
    repo: str | None = typer.Option(None, "--repo", help="owner/name (defaults to $GITHUB_REPOSITORY)"),
    ref: str | None = typer.Option(None, "--ref", help="Triggering ref (defaults to $GITHUB_REF)"),
    sha: str | None = typer.Option(None, "--sha", help="Triggering commit (defaults to $GITHUB_SHA)"),
) -> None:
    """Create or update the versioning pull request.

    Applies pending changesets on the release branch, force pushes it, and
    keeps the PR and its draft GitHub release in sync.
    """
    cli = build_context(cwd)
    ctx = build_release_context(cli, repo=repo, ref=ref, sha=sha, version_script=script)

    outcome = exit_on_error(run_version(ctx), cli.console)
    if outcome.frontmatter is not None and outcome.frontmatter.draft_id is not None:
        cli.console.print(f"draft release: {outcome.frontmatter.draft_id}", Style.DIM)
