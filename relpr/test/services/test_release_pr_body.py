from __future__ import annotations

from relpr.services.release.model import ChangelogEntry, PreState
from relpr.services.release.pr_body import render_pull_request_body, with_pre_tag

_ENTRY = ChangelogEntry(version="1.2.0", content="### Minor Changes\n\n- Add widgets")


def test_with_pre_tag() -> None:
    assert with_pre_tag("Version Packages", None) == "Version Packages"
    assert with_pre_tag("Version Packages", PreState(mode="pre", tag="next")) == "Version Packages (next)"


def test_body_ends_with_releases_section() -> None:
    body = render_pull_request_body(branch="main", entry=_ENTRY, has_publish_script=True, pre_state=None)
    assert body.endswith("# Releases\n### Minor Changes\n\n- Add widgets")
    assert "published automatically" in body
    assert "changesets to main" in body
    assert "pre mode" not in body


def test_body_without_publish_script() -> None:
    body = render_pull_request_body(branch="main", entry=_ENTRY, has_publish_script=False, pre_state=None)
    assert "publish the packages yourself" in body


def test_body_in_pre_mode() -> None:
    body = render_pull_request_body(
        branch="next",
        entry=_ENTRY,
        has_publish_script=True,
        pre_state=PreState(mode="pre", tag="beta"),
    )
    assert "> [!WARNING]" in body
    assert "`next` is currently in **pre mode**" in body
    assert body.index("[!WARNING]") < body.index("# Releases")
