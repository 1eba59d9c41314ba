from __future__ import annotations

import os
from pathlib import Path

import typer

from relpr.cli.commands._helpers import exit_on_error
from relpr.cli.context import build_context, build_release_context
from relpr.services.release.orchestrator import run_publish
from relpr.services.release.outputs import publish_outputs, write_step_outputs


def publish(
    cwd: Path | None = typer.Option(None, "--cwd", help="Project root (defaults to the current directory)"),
    script: str | None = typer.Option(None, "--script", help="Publish command (overrides [publish] script)"),
    repo: str | None = typer.Option(None, "--repo", help="owner/name (defaults to $GITHUB_REPOSITORY)"),
    ref: str | None = typer.Option(None, "--ref", help="Triggering ref (defaults to $GITHUB_REF)"),
    sha: str | None = typer.Option(None, "--sha", help="Triggering commit (defaults to $GITHUB_SHA)"),
) -> None:
    """Publish packages and release the draft of the merged versioning PR.

    When $GITHUB_OUTPUT is set, ``published`` and ``publishedPackages`` are
    written as step outputs.
    """
    cli = build_context(cwd)
    ctx = build_release_context(cli, repo=repo, ref=ref, sha=sha, publish_script=script)

    result = exit_on_error(run_publish(ctx), cli.console)

    output_path = os.environ.get("GITHUB_OUTPUT")
    if output_path:
        exit_on_error(write_step_outputs(Path(output_path), publish_outputs(result)), cli.console)
