"""Git operations module.

Usage:
    from relpr.git import Repository

    repo = Repository(Path("/path/to/clone"))
    if repo.is_shallow().unwrap_or(False):
        repo.deepen(50)
"""

from relpr.git.repository import (
    GitError,
    Repository,
)

__all__ = [
    "GitError",
    "Repository",
]
