from __future__ import annotations

import json
from pathlib import Path

from relpr.core.result import Err, Ok
from relpr.services.release.model import PublishResult, ReleasedPackage
from relpr.services.release.outputs import publish_outputs, write_step_outputs


def test_outputs_when_nothing_published() -> None:
    assert publish_outputs(PublishResult()) == {"published": "false", "publishedPackages": "[]"}


def test_outputs_list_packages() -> None:
    result = PublishResult(packages=(ReleasedPackage("pkg-a", "1.0.0"), ReleasedPackage("@s/b", "2.0.0")))
    outputs = publish_outputs(result)
    assert outputs["published"] == "true"
    assert json.loads(outputs["publishedPackages"]) == [
        {"name": "pkg-a", "version": "1.0.0"},
        {"name": "@s/b", "version": "2.0.0"},
    ]
    assert "\n" not in outputs["publishedPackages"]


def test_write_appends(tmp_path: Path) -> None:
    path = tmp_path / "github_output"
    path.write_text("previous=1\n", encoding="utf-8")

    assert write_step_outputs(path, {"published": "false", "publishedPackages": "[]"}) == Ok(None)
    assert path.read_text(encoding="utf-8") == "previous=1\npublished=false\npublishedPackages=[]\n"


def test_write_failure_is_io_error(tmp_path: Path) -> None:
    result = write_step_outputs(tmp_path / "missing" / "out", {"published": "false"})
    assert isinstance(result, Err)
    assert result.error.kind == "io_error"
