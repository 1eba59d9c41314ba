"""Locate the commit that consumed the pending changesets.

Versioning deletes ``.changeset/*.md``; the newest commit with such a
deletion is the merged versioning PR. CI clones are usually shallow, so the
history is deepened in steps until the commit shows up or the clone is full.
Each step is a network fetch; on a large repository whose last release is
very old this is the slow path.
"""

from __future__ import annotations

from typing import Protocol

from relpr.core.result import Err, Ok, Result
from relpr.git.repository import GitError
from relpr.output.console import ConsoleProtocol, Style
from relpr.services.release.errors import ReleaseError, from_git_error

CHANGESET_PATHSPEC = ".changeset/*.md"


class HistorySource(Protocol):
    def find_deletion_commit(self, pathspec: str) -> Result[str | None, GitError]: ...

    def is_shallow(self) -> Result[bool, GitError]: ...

    def deepen(self, by: int) -> Result[None, GitError]: ...


def find_changeset_commit(
    repo: HistorySource,
    *,
    console: ConsoleProtocol,
    deepen_by: int = 50,
    max_rounds: int = 200,
) -> Result[str | None, ReleaseError]:
    """Newest commit that deleted a changeset file, deepening as needed.

    Args:
        repo: Local clone to search
        console: Progress output
        deepen_by: Commits fetched per deepening round
        max_rounds: Deepening rounds before giving up

    Returns:
        Ok(commit hash), or Ok(None) when no such commit exists (first
        release) or the search gave up after max_rounds
    """
    rounds = 0
    while True:
        found = repo.find_deletion_commit(CHANGESET_PATHSPEC)
        if isinstance(found, Err):
            return Err(from_git_error(found.error))
        if found.value is not None:
            return Ok(found.value)

        shallow = repo.is_shallow()
        if isinstance(shallow, Err):
            return Err(from_git_error(shallow.error))
        if not shallow.value:
            return Ok(None)

        if rounds >= max_rounds:
            console.warning(
                f"no changeset commit within {rounds * deepen_by} extra commits of history; giving up"
            )
            return Ok(None)

        console.print(f"git fetch --deepen={deepen_by}", Style.DIM)
        deepened = repo.deepen(deepen_by)
        if isinstance(deepened, Err):
            return Err(from_git_error(deepened.error))
        rounds += 1
