"""In-memory stand-ins for the repository and the release tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from releaser.core.result import Err, Ok, Result
from releaser.git.repository import GitError
from releaser.release.errors import ReleaseError
from releaser.release.model import ExternalInvocationResult
from releaser.release.tool import LineSink


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and ".git" not in p.parts
    }


@dataclass
class FakeRepository:
    """Repository whose history is a list of commit messages.

    A commit only happens when the files under ``path`` differ from the
    content at the previous commit.
    """

    path: Path
    tags: set[str] = field(default_factory=set)
    commits: list[str] = field(default_factory=list)
    is_repository: bool = True
    fail_commit: bool = False
    undeletable_tags: set[str] = field(default_factory=set)
    _committed: dict[str, bytes] = field(default_factory=dict)
    _staged: bool = False

    def __post_init__(self) -> None:
        self._committed = _snapshot(self.path)

    def exists(self) -> bool:
        return self.is_repository

    def stage_all(self) -> Result[None, GitError]:
        self._staged = _snapshot(self.path) != self._committed
        return Ok(None)

    def has_staged_changes(self) -> Result[bool, GitError]:
        return Ok(self._staged)

    def commit(self, message: str) -> Result[str, GitError]:
        if self.fail_commit:
            return Err(GitError(command="commit", message="simulated commit failure"))
        if not self._staged:
            return Err(GitError(command="commit", message="nothing to commit"))
        self.commits.append(message)
        self._committed = _snapshot(self.path)
        self._staged = False
        return Ok(f"[main] {message}")

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        return Ok(name in self.tags)

    def delete_tag(self, name: str) -> Result[None, GitError]:
        if name in self.undeletable_tags:
            return Err(GitError(command="tag --delete", message=f"cannot delete {name}"))
        self.tags.discard(name)
        return Ok(None)


@dataclass
class FakeReleaseTool:
    """Release tool recording its invocations.

    ``prepare`` tags the repository with the release version, like the real
    tool does as part of its own cycle.
    """

    repo: FakeRepository | None = None
    prepare_exit_code: int = 0
    clean_exit_code: int = 0
    launch_fails: bool = False
    calls: list[str] = field(default_factory=list)
    name: str = "fake-mvn"

    def clean(self, root: Path, on_line: LineSink) -> Result[ExternalInvocationResult, ReleaseError]:
        self.calls.append("clean")
        on_line("[INFO] release:clean")
        return Ok(ExternalInvocationResult(self.clean_exit_code, ("[INFO] release:clean",)))

    def prepare(
        self,
        root: Path,
        release_version: str,
        next_dev_version: str,
        on_line: LineSink,
    ) -> Result[ExternalInvocationResult, ReleaseError]:
        self.calls.append(f"prepare {release_version} {next_dev_version}")
        if self.launch_fails:
            return Err(ReleaseError(kind="tool_launch_failed", message="failed to run fake-mvn"))
        if self.repo is not None and self.prepare_exit_code == 0:
            self.repo.tags.add(release_version)
        lines = (f"What is the release version? {release_version}", "[INFO] BUILD SUCCESS")
        for line in lines:
            on_line(line)
        return Ok(ExternalInvocationResult(self.prepare_exit_code, lines))
