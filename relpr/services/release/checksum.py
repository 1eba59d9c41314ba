"""Draft release synchronization guarded by a content fingerprint.

The PR frontmatter remembers a checksum of the draft release body as it was
last written by a run. A mismatch means someone edited the draft by hand;
the edit wins and the draft is left alone until it is resolved.
"""

from __future__ import annotations

import hashlib

from relpr.core.result import Err, Ok, Result
from relpr.output.console import ConsoleProtocol
from relpr.services.release.errors import ReleaseError
from relpr.services.release.host import ReleaseHost
from relpr.services.release.model import ChangelogEntry, Frontmatter


def content_checksum(text: str) -> str:
    """Fingerprint of a release body (change detection only, not security)."""
    return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()


def release_tag(entry: ChangelogEntry) -> str:
    return f"v{entry.version}"


def create_draft_release(
    host: ReleaseHost, entry: ChangelogEntry
) -> Result[Frontmatter, ReleaseError]:
    """Create the draft for a new versioning PR and return its frontmatter.

    The tag is only created once the draft is published.
    """
    tag = release_tag(entry)
    created = host.create_release(tag_name=tag, name=tag, body=entry.content, draft=True)
    if isinstance(created, Err):
        return created

    release = created.value
    return Ok(Frontmatter(draft_id=release.id, checksum=content_checksum(release.body)))


def sync_draft_release(
    host: ReleaseHost,
    frontmatter: Frontmatter,
    entry: ChangelogEntry,
    *,
    console: ConsoleProtocol | None = None,
) -> Result[Frontmatter, ReleaseError]:
    """Overwrite the tracked draft unless it drifted since the last run.

    Returns:
        Ok(frontmatter with a fresh checksum) after an overwrite,
        Ok(the input frontmatter unchanged) when the draft was edited, so
        the next run compares against the same checksum again,
        Err if the frontmatter is incomplete or the host fails
    """
    if frontmatter.draft_id is None or frontmatter.checksum is None:
        return Err(
            ReleaseError(
                kind="config_error",
                message="frontmatter must carry draft_id and checksum to sync a draft",
            )
        )

    live = host.get_release(frontmatter.draft_id)
    if isinstance(live, Err):
        return live

    if content_checksum(live.value.body) != frontmatter.checksum:
        if console is not None:
            console.warning(
                f"draft release {frontmatter.draft_id} was edited by hand; leaving it untouched"
            )
        return Ok(frontmatter)

    tag = release_tag(entry)
    updated = host.update_release(
        frontmatter.draft_id,
        draft=True,
        name=tag,
        tag_name=tag,
        body=entry.content,
    )
    if isinstance(updated, Err):
        return updated

    return Ok(
        Frontmatter(
            draft_id=frontmatter.draft_id,
            checksum=content_checksum(updated.value.body),
        )
    )
