"""External change tool (changesets) invocation.

Version bumping and changelog rewriting are done by the changesets CLI or
by a user provided script; publishing always uses a user script. This module
only runs them.
"""

from __future__ import annotations

import json
import shlex
from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.core.structured import as_str_dict, get_str
from relpr.output.console import ConsoleProtocol, Style
from relpr.platform.process import run as run_process
from relpr.services.release.errors import ReleaseError
from relpr.services.release.timeouts import TOOL_TIMEOUT_SECONDS

CHANGESETS_CLI_DIR = Path("node_modules") / "@changesets" / "cli"


def _split_script(script: str) -> Result[list[str], ReleaseError]:
    try:
        cmd = shlex.split(script)
    except ValueError as e:
        return Err(ReleaseError(kind="config_error", message=f"invalid script: {e}", hint=script))
    if not cmd:
        return Err(ReleaseError(kind="config_error", message="script is empty"))
    return Ok(cmd)


def changesets_bump_command(cwd: Path) -> Result[list[str], ReleaseError]:
    """Command running the locally installed changesets CLI.

    changesets 1.x named the command ``bump``; 2.x renamed it ``version``.
    """
    cli_dir = cwd / CHANGESETS_CLI_DIR
    manifest_path = cli_dir / "package.json"
    try:
        obj: object = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="config_error",
                message=f'@changesets/cli is not installed in "{cwd}"',
                hint="Have you forgotten to install @changesets/cli?",
            )
        )
    except (OSError, json.JSONDecodeError) as e:
        return Err(ReleaseError(kind="config_error", message=f"unreadable @changesets/cli manifest: {e}"))

    data = as_str_dict(obj) or {}
    version = get_str(data, "version") or ""
    try:
        major = int(version.split(".", 1)[0])
    except ValueError:
        return Err(
            ReleaseError(kind="config_error", message=f"unexpected @changesets/cli version: {version!r}")
        )

    subcommand = "bump" if major < 2 else "version"
    return Ok(["node", str(cli_dir / "bin.js"), subcommand])


def _run_tool(cmd: list[str], *, cwd: Path, console: ConsoleProtocol) -> Result[str, ReleaseError]:
    console.print(" ".join(cmd), Style.DIM)
    result = run_process(cmd, cwd=cwd, timeout=TOOL_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="tool_failed",
                message=str(e),
                hint=e.stderr.strip() or e.stdout.strip() or None,
            )
        )
    return result


def bump(cwd: Path, *, script: str | None, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    """Apply pending changesets: bump versions and rewrite changelogs."""
    cmd = _split_script(script) if script else changesets_bump_command(cwd)
    if isinstance(cmd, Err):
        return cmd

    ran = _run_tool(cmd.value, cwd=cwd, console=console)
    if isinstance(ran, Err):
        return ran
    return Ok(None)


def publish(cwd: Path, *, script: str, console: ConsoleProtocol) -> Result[str, ReleaseError]:
    """Run the publish script and return its stdout (parsed for new tags)."""
    cmd = _split_script(script)
    if isinstance(cmd, Err):
        return cmd

    ran = _run_tool(cmd.value, cwd=cwd, console=console)
    if isinstance(ran, Ok) and ran.value.strip():
        console.print(ran.value.rstrip())
    return ran
