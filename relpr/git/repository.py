"""Git repository abstraction.

This module provides the Repository class: the version control operations a
release run needs against the local clone (branching, committing, pushing,
and inspecting a possibly shallow history). All operations return Result
types for proper error handling.

Usage:
    repo = Repository(Path("/path/to/clone"))

    match repo.switch_or_create_branch("changeset-release/main"):
        case Ok(created):
            print("created" if created else "reused")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relpr.core.result import Err, Ok, Result
from relpr.platform.process import ProcessError
from relpr.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root (also the working directory of
            every git call; nothing relies on the process cwd)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def configure_identity(self, name: str, email: str) -> Result[None, GitError]:
        """Set the committer identity for this clone."""
        for key, value in (("user.name", name), ("user.email", email)):
            result = self._run(["config", key, value])
            if isinstance(result, Err):
                return Err(_git_error(f"config {key}", result.error, "git config failed"))
        return Ok(None)

    def switch_or_create_branch(self, branch: str) -> Result[bool, GitError]:
        """Check out ``branch``, creating it from HEAD when it does not exist.

        An existing remote branch is picked up by ``git checkout`` through
        remote tracking.

        Returns:
            Ok(True) if the branch was created, Ok(False) if it was reused
        """
        checkout = self._run(["checkout", branch])
        if isinstance(checkout, Ok):
            return Ok(False)

        create = self._run(["checkout", "-b", branch])
        if isinstance(create, Err):
            return Err(_git_error(f"checkout -b {branch}", create.error, "checkout failed"))
        return Ok(True)

    def reset_hard(self, ref: str) -> Result[None, GitError]:
        result = self._run(["reset", "--hard", ref])
        if isinstance(result, Err):
            return Err(_git_error(f"reset --hard {ref}", result.error, "reset failed"))
        return Ok(None)

    def is_clean(self) -> Result[bool, GitError]:
        """True when the working tree has no changes (tracked or untracked)."""
        result = self._run(["status", "--porcelain"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() == "")
            case Err(e):
                return Err(_git_error("status", e, "git status failed"))

    def commit_all(self, message: str) -> Result[None, GitError]:
        """Stage everything and commit."""
        add = self._run(["add", "."])
        if isinstance(add, Err):
            return Err(_git_error("add .", add.error, "git add failed"))

        commit = self._run(["commit", "-m", message])
        if isinstance(commit, Err):
            return Err(_git_error("commit", commit.error, "git commit failed"))
        return Ok(None)

    def push(self, branch: str, *, force: bool = False) -> Result[None, GitError]:
        """Push HEAD to ``branch`` on origin."""
        args = ["push", "origin", f"HEAD:{branch}"]
        if force:
            args.append("--force")
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error(f"push {branch}", result.error, "push failed"))
        return Ok(None)

    def push_tags(self) -> Result[None, GitError]:
        result = self._run(["push", "origin", "--tags"])
        if isinstance(result, Err):
            return Err(_git_error("push --tags", result.error, "push failed"))
        return Ok(None)

    def is_shallow(self) -> Result[bool, GitError]:
        """Whether the clone holds truncated history.

        git older than 2.15 echoes the flag back instead of answering; fall
        back to checking for ``<git-dir>/shallow`` in that case.
        """
        result = self._run(["rev-parse", "--is-shallow-repository"])
        if isinstance(result, Err):
            return Err(_git_error("rev-parse --is-shallow-repository", result.error, "rev-parse failed"))

        answer = result.value.strip()
        if answer != "--is-shallow-repository":
            return Ok(answer == "true")

        git_dir = self._run(["rev-parse", "--git-dir"])
        if isinstance(git_dir, Err):
            return Err(_git_error("rev-parse --git-dir", git_dir.error, "rev-parse failed"))
        return Ok((self.path / git_dir.value.strip() / "shallow").exists())

    def deepen(self, by: int) -> Result[None, GitError]:
        """Fetch ``by`` more commits of history into a shallow clone."""
        result = self._run(["fetch", f"--deepen={by}"])
        if isinstance(result, Err):
            return Err(_git_error("fetch --deepen", result.error, "fetch failed"))
        return Ok(None)

    def find_deletion_commit(self, pathspec: str) -> Result[str | None, GitError]:
        """Newest commit that deleted a file matching ``pathspec``.

        Only the history present locally is searched.

        Returns:
            Ok(abbreviated hash), or Ok(None) when no such commit is visible
        """
        result = self._run(
            [
                "log",
                "--max-count=1",
                "--diff-filter=D",
                "--pretty=format:%h",
                "--",
                pathspec,
            ]
        )
        match result:
            case Err(e):
                return Err(_git_error("log --diff-filter=D", e, "git log failed"))
            case Ok(stdout):
                commit = stdout.strip()
                return Ok(commit or None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
