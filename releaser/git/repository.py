"""Git repository abstraction.

The release workflow needs only a small slice of git: stage everything,
commit, and delete tags. ``RepositoryClient`` names that slice so the
orchestrator can run against an in-memory fake; ``Repository`` implements
it with the git command line. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.stage_all():
        case Ok(_):
            repo.commit("Bump docs and scripts to 1.1.0")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from releaser.core.result import Err, Ok, Result
from releaser.platform.process import ProcessError
from releaser.platform.process import run as run_process

# Applies to quick lookups only; staging and committing a large tree may take longer.
_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "RepositoryClient",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """A failed git invocation; ``message`` is git's own stderr when it printed any."""

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Paths reported by ``git status --porcelain=v1``, split by index state.

    A path with both staged and unstaged edits appears in both tuples.
    Untracked paths count as unstaged.
    """

    staged: tuple[str, ...] = ()
    unstaged: tuple[str, ...] = ()

    @classmethod
    def parse(cls, output: str) -> GitStatus:
        staged: list[str] = []
        unstaged: list[str] = []
        for line in output.splitlines():
            # "XY path": X is the index column, Y the worktree column.
            if len(line) < 4:
                continue
            index, worktree, path = line[0], line[1], line[3:]
            if index not in " ?":
                staged.append(path)
            if worktree != " ":
                unstaged.append(path)
        return cls(staged=tuple(staged), unstaged=tuple(unstaged))

    @property
    def is_clean(self) -> bool:
        return not self.staged and not self.unstaged


class RepositoryClient(Protocol):
    """The version-control capabilities the release workflow consumes."""

    @property
    def path(self) -> Path: ...

    def exists(self) -> bool: ...

    def stage_all(self) -> Result[None, GitError]: ...

    def has_staged_changes(self) -> Result[bool, GitError]: ...

    def commit(self, message: str) -> Result[str, GitError]: ...

    def tag_exists(self, name: str) -> Result[bool, GitError]: ...

    def delete_tag(self, name: str) -> Result[None, GitError]: ...


class Repository:
    """Git repository driven through the git command line.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Check if this is a valid git repository (worktrees use a .git file)."""
        return (self._path / ".git").exists()

    def status(self) -> Result[GitStatus, GitError]:
        """Get working tree status.

        Runs `git status --porcelain=v1` and parses the output.
        """
        result = self._run(["status", "--porcelain=v1"])
        match result:
            case Err(e):
                return Err(_git_error("status", e))
            case Ok(stdout):
                return Ok(GitStatus.parse(stdout))

    def stage_all(self) -> Result[None, GitError]:
        """Stage every change in the working tree, deletions included."""
        result = self._run(["add", "--all", "."], timeout=None)
        match result:
            case Err(e):
                return Err(_git_error("add --all", e))
            case Ok(_):
                return Ok(None)

    def has_staged_changes(self) -> Result[bool, GitError]:
        return self.status().map(lambda status: bool(status.staged))

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index with the given message.

        Returns:
            Ok(output) on success
            Err(GitError) on failure (nothing to commit, no identity, etc.)
        """
        result = self._run(["commit", "-m", message], timeout=None)
        match result:
            case Err(e):
                return Err(_git_error("commit", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        result = self._run(["rev-parse", "--quiet", "--verify", f"refs/tags/{name}"])
        match result:
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(_git_error("rev-parse", e))
            case Ok(_):
                return Ok(True)

    def delete_tag(self, name: str) -> Result[None, GitError]:
        result = self._run(["tag", "--delete", name])
        match result:
            case Err(e):
                return Err(_git_error("tag --delete", e))
            case Ok(_):
                return Ok(None)

    def _run(
        self, args: list[str], *, timeout: float | None = _GIT_TIMEOUT_SECONDS
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository; timeout=None waits indefinitely."""
        return run_process(
            ["git", "-C", str(self._path), *args],
            cwd=self._path,
            timeout=timeout,
        )


def _git_error(command: str, error: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or f"git {command} failed",
        returncode=error.returncode,
    )
