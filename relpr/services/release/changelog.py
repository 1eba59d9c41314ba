"""Changelog section extraction.

The change tool writes changelogs with one ATX header per release
(``## 1.2.0``), newest first. The versioning PR and its draft release show
the newest section.
"""

from __future__ import annotations

import re
from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import ChangelogEntry

_VERSION_HEADER_RE = re.compile(r"^## \d+\.\d+\.\d+", re.MULTILINE)
_HEADER_LINE_RE = re.compile(r"^## (.+?)\s*$", re.MULTILINE)


def _section(text: str, start: int) -> ChangelogEntry:
    following = _VERSION_HEADER_RE.search(text, start + 1)
    end = following.start() if following else len(text)
    section = text[start:end]

    header = _HEADER_LINE_RE.match(section)
    assert header is not None, "section always starts at a version header"
    return ChangelogEntry(
        version=header.group(1),
        content=section[header.end() :].strip(),
    )


def latest_changelog_entry(text: str) -> Result[ChangelogEntry, ReleaseError]:
    """Return the first (newest) version section of a changelog.

    The section runs up to the next version header, or to the end of the
    document when there is none.
    """
    first = _VERSION_HEADER_RE.search(text)
    if first is None:
        return Err(
            ReleaseError(
                kind="parse_error",
                message="changelog has no version header (expected '## X.Y.Z')",
                hint="Are changelogs disabled in .changeset/config.json?",
            )
        )
    return Ok(_section(text, first.start()))


def changelog_entry_for_version(text: str, version: str) -> ChangelogEntry | None:
    """Return the section whose header names exactly ``version``."""
    for match in _VERSION_HEADER_RE.finditer(text):
        entry = _section(text, match.start())
        if entry.version == version:
            return entry
    return None


def read_latest_changelog_entry(path: Path) -> Result[ChangelogEntry, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_error",
                message=f"failed to read changelog: {e}",
                hint=str(path),
            )
        )
    return latest_changelog_entry(text)
