from __future__ import annotations

from datetime import UTC, datetime

from relpr.services.release.model import PullRequest


def _merged_at(pull: PullRequest) -> datetime | None:
    if pull.merged_at is None:
        return None
    # GitHub timestamps end in "Z"; fromisoformat accepts it since 3.11.
    merged = datetime.fromisoformat(pull.merged_at)
    if merged.tzinfo is None:
        merged = merged.replace(tzinfo=UTC)
    return merged


def _sort_key(pull: PullRequest) -> tuple[int, float]:
    merged = _merged_at(pull)
    if merged is None:
        return (1, 0.0)
    return (0, merged.timestamp())


def select_pull_request(pulls: list[PullRequest]) -> PullRequest | None:
    """Pick the PR responsible for a commit among its associated PRs.

    Merged PRs come before unmerged ones, earliest merge first; ties keep
    the host's order. Note this is the *earliest* merged PR, not the latest.
    """
    if not pulls:
        return None
    return sorted(pulls, key=_sort_key)[0]
