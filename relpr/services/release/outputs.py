"""Step outputs for GitHub Actions (``$GITHUB_OUTPUT``)."""

from __future__ import annotations

import json
from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import PublishResult


def publish_outputs(result: PublishResult) -> dict[str, str]:
    packages = [{"name": p.name, "version": p.version} for p in result.packages]
    return {
        "published": "true" if result.published else "false",
        "publishedPackages": json.dumps(packages, separators=(",", ":")),
    }


def write_step_outputs(path: Path, outputs: dict[str, str]) -> Result[None, ReleaseError]:
    """Append ``key=value`` lines; values are single-line by construction."""
    lines = "".join(f"{key}={value}\n" for key, value in outputs.items())
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(lines)
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"failed to write step outputs: {e}", hint=str(path)))
    return Ok(None)
