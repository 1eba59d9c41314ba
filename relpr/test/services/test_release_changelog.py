from __future__ import annotations

from pathlib import Path

from relpr.core.result import Err, Ok
from relpr.services.release.changelog import (
    changelog_entry_for_version,
    latest_changelog_entry,
    read_latest_changelog_entry,
)
from relpr.services.release.model import ChangelogEntry

_CHANGELOG = """# @acme/widgets

## 1.2.0

### Minor Changes

- abc123: Add the blue widget

## 1.1.0

### Patch Changes

- def456: Fix the red widget
"""


def test_latest_entry_stops_at_next_version_header() -> None:
    result = latest_changelog_entry(_CHANGELOG)
    assert result == Ok(
        ChangelogEntry(
            version="1.2.0",
            content="### Minor Changes\n\n- abc123: Add the blue widget",
        )
    )


def test_single_section_runs_to_end_of_document() -> None:
    result = latest_changelog_entry("## 0.1.0\n\n- first\n- second\n")
    assert result == Ok(ChangelogEntry(version="0.1.0", content="- first\n- second"))


def test_prerelease_header_keeps_full_version() -> None:
    result = latest_changelog_entry("## 2.0.0-next.1\n\n- beta\n")
    assert isinstance(result, Ok)
    assert result.value.version == "2.0.0-next.1"


def test_non_version_h2_headers_are_not_boundaries() -> None:
    text = "## 1.0.0\n\n## Notes\n\nsee docs\n\n## 0.9.0\n\nold\n"
    result = latest_changelog_entry(text)
    assert isinstance(result, Ok)
    assert result.value.content == "## Notes\n\nsee docs"


def test_missing_header_is_parse_error() -> None:
    result = latest_changelog_entry("# pkg\n\nnothing released yet\n")
    assert isinstance(result, Err)
    assert result.error.kind == "parse_error"
    assert result.error.hint is not None


def test_entry_for_version() -> None:
    entry = changelog_entry_for_version(_CHANGELOG, "1.1.0")
    assert entry == ChangelogEntry(version="1.1.0", content="### Patch Changes\n\n- def456: Fix the red widget")


def test_entry_for_unknown_version() -> None:
    assert changelog_entry_for_version(_CHANGELOG, "3.0.0") is None
    assert changelog_entry_for_version(_CHANGELOG, "1.2") is None


def test_read_from_file(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text(_CHANGELOG, encoding="utf-8")

    result = read_latest_changelog_entry(path)
    assert isinstance(result, Ok)
    assert result.value.version == "1.2.0"


def test_read_missing_file_is_io_error(tmp_path: Path) -> None:
    result = read_latest_changelog_entry(tmp_path / "CHANGELOG.md")
    assert isinstance(result, Err)
    assert result.error.kind == "io_error"
