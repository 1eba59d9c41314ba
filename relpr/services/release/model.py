from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

WorkspaceTool = Literal["root", "npm", "yarn", "pnpm", "lerna", "bolt"]


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    """Newest section of a changelog; ``content`` excludes the header line."""

    version: str
    content: str


@dataclass(frozen=True, slots=True)
class Frontmatter:
    """Run state carried in the versioning PR body."""

    draft_id: int | None = None
    checksum: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.draft_id is not None and self.checksum is not None


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    body: str
    merged_at: str | None = None
    # REST id, distinct from the number shown in the UI
    id: int | None = None


@dataclass(frozen=True, slots=True)
class Release:
    id: int
    body: str
    tag_name: str
    draft: bool
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Package:
    name: str
    version: str
    dir: Path

    @property
    def tag(self) -> str:
        return f"v{self.version}"


@dataclass(frozen=True, slots=True)
class PackageWorkspace:
    tool: WorkspaceTool
    root: Package
    packages: tuple[Package, ...]

    @property
    def is_multi_package(self) -> bool:
        return self.tool != "root"

    def by_name(self) -> dict[str, Package]:
        return {p.name: p for p in self.packages}


@dataclass(frozen=True, slots=True)
class ReleasedPackage:
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class PreState:
    """Changesets pre-release mode (``.changeset/pre.json``)."""

    mode: str
    tag: str

    @property
    def active(self) -> bool:
        return self.mode == "pre"


@dataclass(frozen=True, slots=True)
class PublishResult:
    packages: tuple[ReleasedPackage, ...] = ()

    @property
    def published(self) -> bool:
        return bool(self.packages)


@dataclass(frozen=True, slots=True)
class VersionOutcome:
    pull_request_number: int
    created: bool
    frontmatter: Frontmatter | None
