"""Git operations module.

Usage:
    from releaser.git import Repository

    repo = Repository(Path("/path/to/repo"))
    if repo.stage_all().is_ok():
        repo.commit("Set scm.tag to HEAD")
"""

from releaser.git.repository import (
    GitError,
    GitStatus,
    Repository,
    RepositoryClient,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "RepositoryClient",
]
