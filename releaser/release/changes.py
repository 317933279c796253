"""Recording changes and cleaning up tags in the repository under release."""

from __future__ import annotations

from releaser.core.result import Err, Ok, Result
from releaser.git.repository import GitError, RepositoryClient
from releaser.output.console import ConsoleProtocol
from releaser.release.errors import ReleaseError
from releaser.release.model import CommitRecord, TagSet


def _not_a_repository(repo: RepositoryClient) -> ReleaseError:
    return ReleaseError(
        kind="not_a_repository",
        message=f"not a git repository: {repo.path}",
        hint="Run releaser from the root of the git checkout.",
    )


def _git_failed(error: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=error.message)


def commit_changes(
    repo: RepositoryClient,
    message: str,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[CommitRecord, ReleaseError]:
    """Stage every change in the working tree and commit it.

    No empty commit is created: when nothing is staged the record comes
    back with ``created=False``.
    """
    if not repo.exists():
        return Err(_not_a_repository(repo))

    if dry_run:
        console.info(f"Would commit: {message}")
        return Ok(CommitRecord(message=message, created=False))

    console.info(f"Committing: {message}")
    staged = repo.stage_all().map_err(_git_failed)
    if isinstance(staged, Err):
        return staged

    pending = repo.has_staged_changes().map_err(_git_failed)
    if isinstance(pending, Err):
        return pending
    if not pending.value:
        console.print("Nothing to commit.")
        return Ok(CommitRecord(message=message, created=False))

    committed = repo.commit(message)
    if isinstance(committed, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to commit changes: {committed.error.message}",
            )
        )

    console.success("Changes committed.")
    return Ok(CommitRecord(message=message, created=True))


def delete_tags(
    repo: RepositoryClient,
    tags: TagSet,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[tuple[str, ...], ReleaseError]:
    """Delete every tag of the set that exists.

    Missing tags are not an error. Every tag is attempted even if an
    earlier deletion failed.

    Returns:
        Ok(names actually deleted) or Err listing the tags that could not be deleted.
    """
    if not repo.exists():
        return Err(_not_a_repository(repo))

    deleted: list[str] = []
    failures: list[str] = []
    for name in tags:
        exists = repo.tag_exists(name)
        if isinstance(exists, Err):
            failures.append(f"{name}: {exists.error.message}")
            continue
        if not exists.value:
            console.print(f"Tag {name} does not exist, nothing to delete.")
            continue
        if dry_run:
            console.print(f"Would delete tag {name}.")
            continue

        result = repo.delete_tag(name)
        if isinstance(result, Err):
            failures.append(f"{name}: {result.error.message}")
            continue
        deleted.append(name)

    if failures:
        for failure in failures:
            console.error(f"Failed to delete tag {failure}")
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"could not delete tag(s): {', '.join(failures)}",
            )
        )

    if deleted:
        console.success(f"Tags deleted: {', '.join(deleted)}")
    return Ok(tuple(deleted))
