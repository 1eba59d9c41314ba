from __future__ import annotations

from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.output.console import MockConsole
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import Package, Release
from relpr.services.release.root_release import create_package_release


class RecordingHost:
    def __init__(self) -> None:
        self.created: list[dict[str, object]] = []

    def create_release(
        self, *, tag_name: str, name: str, body: str, draft: bool, prerelease: bool = False
    ) -> Result[Release, ReleaseError]:
        self.created.append(
            {"tag_name": tag_name, "name": name, "body": body, "draft": draft, "prerelease": prerelease}
        )
        return Ok(Release(id=1, body=body, tag_name=tag_name, draft=draft, name=name))


def _pkg(tmp_path: Path, version: str) -> Package:
    return Package(name="widgets", version=version, dir=tmp_path)


def test_creates_final_release_from_changelog(tmp_path: Path) -> None:
    (tmp_path / "CHANGELOG.md").write_text("# widgets\n\n## 1.1.0\n\n- new\n\n## 1.0.0\n\n- old\n")
    host = RecordingHost()

    result = create_package_release(host, _pkg(tmp_path, "1.1.0"), console=MockConsole())  # type: ignore[arg-type]

    assert isinstance(result, Ok)
    assert host.created == [
        {"tag_name": "v1.1.0", "name": "v1.1.0", "body": "- new", "draft": False, "prerelease": False}
    ]


def test_prerelease_versions(tmp_path: Path) -> None:
    (tmp_path / "CHANGELOG.md").write_text("## 2.0.0-beta.1\n\n- beta\n")
    host = RecordingHost()

    create_package_release(host, _pkg(tmp_path, "2.0.0-beta.1"), console=MockConsole())  # type: ignore[arg-type]

    assert host.created[0]["prerelease"] is True


def test_missing_changelog_skips(tmp_path: Path) -> None:
    host = RecordingHost()
    console = MockConsole()

    result = create_package_release(host, _pkg(tmp_path, "1.0.0"), console=console)  # type: ignore[arg-type]

    assert result == Ok(None)
    assert host.created == []
    assert not console.has_error()


def test_missing_entry_is_parse_error(tmp_path: Path) -> None:
    (tmp_path / "CHANGELOG.md").write_text("## 0.9.0\n\n- old\n")
    host = RecordingHost()

    result = create_package_release(host, _pkg(tmp_path, "1.0.0"), console=MockConsole())  # type: ignore[arg-type]

    assert isinstance(result, Err)
    assert result.error.kind == "parse_error"
    assert "widgets@1.0.0" in result.error.message
    assert host.created == []
