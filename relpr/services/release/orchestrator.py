"""Versioning PR and publish runs.

Both entry points are rerun on every push to the base branch. They never
roll back: each run reconciles remote state forward from whatever the
previous run (or a human) left behind.

At most one run per branch may execute at a time; nothing here locks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

from relpr.core.config import Config
from relpr.core.github import GitHubContext
from relpr.core.result import Err, Ok, Result
from relpr.git.repository import GitError
from relpr.output.console import ConsoleProtocol, Style
from relpr.services.release import frontmatter
from relpr.services.release.change_tool import bump as bump_versions
from relpr.services.release.change_tool import publish as run_publish_script
from relpr.services.release.changelog import read_latest_changelog_entry
from relpr.services.release.changeset_state import read_pre_state
from relpr.services.release.checksum import create_draft_release, sync_draft_release
from relpr.services.release.errors import ReleaseError, from_git_error
from relpr.services.release.host import ReleaseHost
from relpr.services.release.locator import find_changeset_commit
from relpr.services.release.model import (
    Frontmatter,
    Package,
    PackageWorkspace,
    PublishResult,
    ReleasedPackage,
    VersionOutcome,
)
from relpr.services.release.packages import discover_packages
from relpr.services.release.pr_association import select_pull_request
from relpr.services.release.pr_body import render_pull_request_body, with_pre_tag
from relpr.services.release.publish_matcher import match_published_packages
from relpr.services.release.root_release import create_package_release

ROOT_CHANGELOG = "CHANGELOG.md"

T = TypeVar("T")


class VersionControl(Protocol):
    def switch_or_create_branch(self, branch: str) -> Result[bool, GitError]: ...

    def reset_hard(self, ref: str) -> Result[None, GitError]: ...

    def is_clean(self) -> Result[bool, GitError]: ...

    def commit_all(self, message: str) -> Result[None, GitError]: ...

    def push(self, branch: str, *, force: bool = False) -> Result[None, GitError]: ...

    def push_tags(self) -> Result[None, GitError]: ...

    def find_deletion_commit(self, pathspec: str) -> Result[str | None, GitError]: ...

    def is_shallow(self) -> Result[bool, GitError]: ...

    def deepen(self, by: int) -> Result[None, GitError]: ...


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Everything a run needs; the project root is explicit, never the cwd."""

    project_root: Path
    github: GitHubContext
    config: Config
    repo: VersionControl
    host: ReleaseHost
    console: ConsoleProtocol

    @property
    def version_branch(self) -> str:
        return f"{self.config.version.branch_prefix}{self.github.branch}"


def _git(result: Result[T, GitError]) -> Result[T, ReleaseError]:
    if isinstance(result, Err):
        return Err(from_git_error(result.error))
    return result


def _commit_if_dirty(ctx: ReleaseContext, message: str) -> Result[None, ReleaseError]:
    # The change tool may be configured to commit on its own.
    clean = _git(ctx.repo.is_clean())
    if isinstance(clean, Err):
        return clean
    if clean.value:
        return Ok(None)

    if ctx.config.version.discard_root_changelog:
        try:
            (ctx.project_root / ROOT_CHANGELOG).unlink(missing_ok=True)
        except OSError as e:
            return Err(ReleaseError(kind="io_error", message=f"failed to remove {ROOT_CHANGELOG}: {e}"))

    ctx.console.print(f'git commit -m "{message}"', Style.DIM)
    return _git(ctx.repo.commit_all(message))


def run_version(ctx: ReleaseContext) -> Result[VersionOutcome, ReleaseError]:
    """Create or refresh the versioning PR and its draft release."""
    console = ctx.console
    branch = ctx.github.branch
    version_branch = ctx.version_branch
    console.header(f"Versioning {branch} -> {version_branch}")

    pre_state = read_pre_state(ctx.project_root)
    if isinstance(pre_state, Err):
        return pre_state

    switched = _git(ctx.repo.switch_or_create_branch(version_branch))
    if isinstance(switched, Err):
        return switched
    console.print(f"{'created' if switched.value else 'reusing'} branch {version_branch}", Style.DIM)

    reset = _git(ctx.repo.reset_hard(ctx.github.sha))
    if isinstance(reset, Err):
        return reset

    bumped = bump_versions(ctx.project_root, script=ctx.config.version.script, console=console)
    if isinstance(bumped, Err):
        return bumped

    entry = read_latest_changelog_entry(ctx.project_root / ROOT_CHANGELOG)
    if isinstance(entry, Err):
        return entry

    body = render_pull_request_body(
        branch=branch,
        entry=entry.value,
        has_publish_script=ctx.config.publish.script is not None,
        pre_state=pre_state.value,
    )
    title = with_pre_tag(ctx.config.version.pr_title, pre_state.value)

    committed = _commit_if_dirty(ctx, with_pre_tag(ctx.config.version.commit_message, pre_state.value))
    if isinstance(committed, Err):
        return committed

    # The PR head must exist on the remote before the PR can be opened.
    console.print(f"git push --force origin HEAD:{version_branch}", Style.DIM)
    pushed = _git(ctx.repo.push(version_branch, force=True))
    if isinstance(pushed, Err):
        return pushed

    query = f"repo:{ctx.github.repo} state:open head:{version_branch} base:{branch}"
    found = ctx.host.search_open_pull_requests(query)
    if isinstance(found, Err):
        return found

    if not found.value:
        tracked = create_draft_release(ctx.host, entry.value)
        if isinstance(tracked, Err):
            return tracked
        console.print(f"created draft release {tracked.value.draft_id}", Style.DIM)

        created = ctx.host.create_pull_request(
            base=branch,
            head=version_branch,
            title=title,
            body=frontmatter.with_frontmatter(tracked.value, body),
        )
        if isinstance(created, Err):
            return created
        console.success(f"opened pull request #{created.value.number}")
        return Ok(VersionOutcome(pull_request_number=created.value.number, created=True, frontmatter=tracked.value))

    pull = found.value[0]
    console.print(f"found pull request #{pull.number}", Style.DIM)

    state: Frontmatter | None = None
    existing = frontmatter.decode(pull.body)
    if existing is not None and existing.is_complete:
        synced = sync_draft_release(ctx.host, existing, entry.value, console=console)
        if isinstance(synced, Err):
            return synced
        state = synced.value
        new_body = frontmatter.with_frontmatter(state, body)
    else:
        console.warning("frontmatter not found (or incomplete) in the PR body; no draft release is tracked")
        new_body = body

    updated = ctx.host.update_pull_request(pull.number, title=title, body=new_body)
    if isinstance(updated, Err):
        return updated
    console.success(f"updated pull request #{pull.number}")
    return Ok(VersionOutcome(pull_request_number=pull.number, created=False, frontmatter=state))


def _promote_draft_release(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    console = ctx.console
    history = ctx.config.history
    commit = find_changeset_commit(
        ctx.repo,
        console=console,
        deepen_by=history.deepen_by,
        max_rounds=history.max_deepen_rounds,
    )
    if isinstance(commit, Err):
        return commit
    if commit.value is None:
        console.info("no commit consumed changesets yet; nothing to promote")
        return Ok(None)

    pulls = ctx.host.list_pull_requests_for_commit(commit.value)
    if isinstance(pulls, Err):
        return pulls

    pull = select_pull_request(pulls.value)
    if pull is None:
        console.info(f"couldn't find a pull request associated with the {commit.value} commit")
        return Ok(None)
    console.print(f"found pull request #{pull.number} as the latest versioning PR", Style.DIM)

    state = frontmatter.decode(pull.body)
    if state is None or state.draft_id is None:
        console.info(f"the PR associated with {commit.value} commit doesn't have draft_id")
        return Ok(None)

    promoted = ctx.host.update_release(state.draft_id, draft=False)
    if isinstance(promoted, Err):
        return promoted
    console.success(f"published release {promoted.value.tag_name}")
    return Ok(None)


def _release_single_package(ctx: ReleaseContext, pkg: Package) -> Result[None, ReleaseError]:
    created = create_package_release(ctx.host, pkg, console=ctx.console)
    if isinstance(created, Err):
        return created
    if created.value is not None:
        ctx.console.success(f"published release {created.value.tag_name}")
    return Ok(None)


def run_publish(ctx: ReleaseContext) -> Result[PublishResult, ReleaseError]:
    """Publish packages and turn the matching draft into a final release."""
    console = ctx.console
    console.header("Publishing")

    script = ctx.config.publish.script
    if script is None:
        return Err(
            ReleaseError(
                kind="config_error",
                message="no publish script configured",
                hint="Set [publish] script in release-pr.toml or pass --script.",
            )
        )

    stdout = run_publish_script(ctx.project_root, script=script, console=console)
    if isinstance(stdout, Err):
        return stdout

    console.print("git push origin --tags", Style.DIM)
    tags = _git(ctx.repo.push_tags())
    if isinstance(tags, Err):
        return tags

    workspace = discover_packages(ctx.project_root)
    if isinstance(workspace, Err):
        return workspace

    released = match_published_packages(stdout.value, workspace.value)
    if isinstance(released, Err):
        return released

    if released.value:
        follow_up = _after_release(ctx, workspace.value, released.value)
        if isinstance(follow_up, Err):
            return follow_up
    else:
        console.info("no packages were published")

    return Ok(PublishResult(packages=tuple(ReleasedPackage(p.name, p.version) for p in released.value)))


def _after_release(
    ctx: ReleaseContext,
    workspace: PackageWorkspace,
    released: tuple[Package, ...],
) -> Result[None, ReleaseError]:
    for pkg in released:
        ctx.console.success(f"published {pkg.name}@{pkg.version}")
    if workspace.is_multi_package:
        return _promote_draft_release(ctx)
    return _release_single_package(ctx, released[0])
