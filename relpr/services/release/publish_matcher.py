"""Map publish tool output to the packages actually released."""

from __future__ import annotations

import re

from relpr.core.result import Err, Ok, Result
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import Package, PackageWorkspace

# Scoped names contain exactly one "/", bare names none.
_NEW_TAG_RE = re.compile(r"New tag:\s+(@[^/]+/[^@]+|[^/]+)@(\S+)")
_NEW_TAG_MARKER = "New tag:"


def _match_multi_package(stdout: str, workspace: PackageWorkspace) -> Result[tuple[Package, ...], ReleaseError]:
    by_name = workspace.by_name()
    released: list[Package] = []
    for line in stdout.split("\n"):
        match = _NEW_TAG_RE.search(line)
        if match is None:
            continue
        name = match.group(1)
        pkg = by_name.get(name)
        if pkg is None:
            return Err(
                ReleaseError(
                    kind="lookup_error",
                    message=f'package "{name}" reported by the publish tool is not in the workspace',
                    hint="The workspace manifest and the publish tool disagree; this is a bug.",
                )
            )
        released.append(pkg)
    return Ok(tuple(released))


def _match_root_package(stdout: str, workspace: PackageWorkspace) -> Result[tuple[Package, ...], ReleaseError]:
    if len(workspace.packages) != 1:
        return Err(
            ReleaseError(
                kind="config_error",
                message=f"expected exactly one package in a root workspace, found {len(workspace.packages)}",
            )
        )

    # The version comes from the manifest; only the first tag line counts.
    for line in stdout.split("\n"):
        if _NEW_TAG_MARKER in line:
            return Ok((workspace.packages[0],))
    return Ok(())


def match_published_packages(
    stdout: str, workspace: PackageWorkspace
) -> Result[tuple[Package, ...], ReleaseError]:
    """Packages the publish output reports as tagged, in output order.

    Multi-package output is not deduplicated. A package missing from the
    workspace is a ``lookup_error``.
    """
    if workspace.is_multi_package:
        return _match_multi_package(stdout, workspace)
    return _match_root_package(stdout, workspace)
