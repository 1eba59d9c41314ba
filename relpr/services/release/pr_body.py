from __future__ import annotations

from relpr.services.release.model import ChangelogEntry, PreState


def with_pre_tag(text: str, pre_state: PreState | None) -> str:
    """Suffix titles and commit messages with the prerelease tag in pre mode."""
    if pre_state is None:
        return text
    return f"{text} ({pre_state.tag})"


def render_pull_request_body(
    *,
    branch: str,
    entry: ChangelogEntry,
    has_publish_script: bool,
    pre_state: PreState | None,
) -> str:
    """Human readable part of the versioning PR body (frontmatter excluded)."""
    if has_publish_script:
        after_merge = "the packages will be published automatically"
    else:
        after_merge = "publish the packages yourself or configure a publish script to do it on merge"

    lines = [
        "This PR is maintained by the release automation. When you're ready to do a release, "
        f"you can merge this and {after_merge}. If you're not ready to do a release yet, "
        f"that's fine, whenever you add more changesets to {branch}, this PR will be updated.",
    ]

    if pre_state is not None:
        lines += [
            "",
            "> [!WARNING]",
            f"> `{branch}` is currently in **pre mode** so this branch has prereleases rather "
            f"than normal releases. If you want to exit prereleases, run `changeset pre exit` "
            f"on `{branch}`.",
        ]

    lines += ["", "# Releases", entry.content]
    return "\n".join(lines)
