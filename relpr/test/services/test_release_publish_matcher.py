from __future__ import annotations

from pathlib import Path

from relpr.core.result import Err, Ok
from relpr.services.release.model import Package, PackageWorkspace
from relpr.services.release.publish_matcher import match_published_packages

_A = Package(name="pkg-a", version="1.0.0", dir=Path("packages/a"))
_B = Package(name="@scope/pkg-b", version="2.1.0-beta.0", dir=Path("packages/b"))
_ROOT = Package(name="monorepo", version="0.0.0", dir=Path("."))


def _multi() -> PackageWorkspace:
    return PackageWorkspace(tool="pnpm", root=_ROOT, packages=(_A, _B))


def test_matches_bare_and_scoped_names_in_output_order() -> None:
    stdout = (
        "🦋  info npm info pkg-a\n"
        "🦋  New tag:  @scope/pkg-b@2.1.0-beta.0\n"
        "🦋  New tag:  pkg-a@1.0.0\n"
    )
    assert match_published_packages(stdout, _multi()) == Ok((_B, _A))


def test_no_tags_means_nothing_published() -> None:
    assert match_published_packages("🦋  warn No unpublished projects to publish\n", _multi()) == Ok(())


def test_duplicates_are_kept() -> None:
    stdout = "New tag: pkg-a@1.0.0\nNew tag: pkg-a@1.0.0\n"
    assert match_published_packages(stdout, _multi()) == Ok((_A, _A))


def test_unknown_package_is_lookup_error() -> None:
    result = match_published_packages("New tag: pkg-z@1.0.0\n", _multi())
    assert isinstance(result, Err)
    assert result.error.kind == "lookup_error"
    assert "pkg-z" in result.error.message


def test_root_package_uses_manifest_version() -> None:
    single = Package(name="widgets", version="3.0.0", dir=Path("."))
    workspace = PackageWorkspace(tool="root", root=single, packages=(single,))

    stdout = "New tag: v3.0.0\nNew tag: something-else\n"
    assert match_published_packages(stdout, workspace) == Ok((single,))


def test_root_without_tag_line() -> None:
    single = Package(name="widgets", version="3.0.0", dir=Path("."))
    workspace = PackageWorkspace(tool="root", root=single, packages=(single,))
    assert match_published_packages("published nothing\n", workspace) == Ok(())


def test_root_workspace_must_hold_one_package() -> None:
    workspace = PackageWorkspace(tool="root", root=_ROOT, packages=(_A, _B))
    result = match_published_packages("New tag: pkg-a@1.0.0\n", workspace)
    assert isinstance(result, Err)
    assert result.error.kind == "config_error"


def test_two_tags_in_reported_order() -> None:
    a = Package(name="pkg-a", version="1.2.0", dir=Path("packages/a"))
    b = Package(name="@scope/pkg-b", version="0.1.0", dir=Path("packages/b"))
    workspace = PackageWorkspace(tool="yarn", root=_ROOT, packages=(b, a))

    stdout = "New tag: pkg-a@1.2.0\nNew tag: @scope/pkg-b@0.1.0\n"
    assert match_published_packages(stdout, workspace) == Ok((a, b))
