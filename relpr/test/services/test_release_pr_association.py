from __future__ import annotations

from relpr.services.release.model import PullRequest
from relpr.services.release.pr_association import select_pull_request


def _pr(number: int, merged_at: str | None) -> PullRequest:
    return PullRequest(number=number, body="", merged_at=merged_at)


def test_empty() -> None:
    assert select_pull_request([]) is None


def test_merged_before_unmerged() -> None:
    pulls = [_pr(1, None), _pr(2, "2024-05-01T10:00:00Z")]
    selected = select_pull_request(pulls)
    assert selected is not None and selected.number == 2


def test_earliest_merge_wins() -> None:
    pulls = [
        _pr(10, "2024-05-03T10:00:00Z"),
        _pr(11, "2024-05-01T10:00:00Z"),
        _pr(12, "2024-05-02T10:00:00Z"),
    ]
    selected = select_pull_request(pulls)
    assert selected is not None and selected.number == 11


def test_ties_keep_host_order() -> None:
    pulls = [_pr(3, None), _pr(4, None)]
    selected = select_pull_request(pulls)
    assert selected is not None and selected.number == 3

    same = "2024-05-01T10:00:00Z"
    selected = select_pull_request([_pr(5, same), _pr(6, same)])
    assert selected is not None and selected.number == 5


def test_offsets_are_compared_as_instants() -> None:
    pulls = [_pr(1, "2024-05-01T12:00:00+02:00"), _pr(2, "2024-05-01T11:00:00Z")]
    selected = select_pull_request(pulls)
    assert selected is not None and selected.number == 1


def test_date_only_timestamps() -> None:
    pulls = [_pr(1, None), _pr(2, "2023-02-01"), _pr(3, "2023-01-01")]
    selected = select_pull_request(pulls)
    assert selected is not None and selected.number == 3
