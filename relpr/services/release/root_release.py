from __future__ import annotations

from relpr.core.result import Err, Ok, Result
from relpr.output.console import ConsoleProtocol
from relpr.services.release.changelog import changelog_entry_for_version
from relpr.services.release.errors import ReleaseError
from relpr.services.release.host import ReleaseHost
from relpr.services.release.model import Package, Release

CHANGELOG_FILE = "CHANGELOG.md"


def create_package_release(
    host: ReleaseHost,
    pkg: Package,
    *,
    console: ConsoleProtocol,
) -> Result[Release | None, ReleaseError]:
    """Publish a final release ``v<version>`` for a single package repository.

    A package without CHANGELOG.md has changelogs disabled: no release is
    created and Ok(None) is returned. A changelog without an entry for the
    package's version is an error.
    """
    path = pkg.dir / CHANGELOG_FILE
    try:
        changelog = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        console.info(f"{path} not found; skipping release creation")
        return Ok(None)
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"failed to read changelog: {e}", hint=str(path)))

    entry = changelog_entry_for_version(changelog, pkg.version)
    if entry is None:
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f"could not find changelog entry for {pkg.name}@{pkg.version}",
                hint=str(path),
            )
        )

    created = host.create_release(
        tag_name=pkg.tag,
        name=pkg.tag,
        body=entry.content,
        draft=False,
        prerelease="-" in pkg.version,
    )
    if isinstance(created, Err):
        return created
    return Ok(created.value)
