"""Literal string substitution across a directory tree.

Files are selected by a literal name suffix (".md", not a glob) and every
non-overlapping occurrence of the search string is replaced at once. Files
are decoded as UTF-8 with ``surrogateescape`` so arbitrary bytes survive
the round trip unchanged.

A file that cannot be read or written is reported and skipped; the walk
continues with the next file.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

from releaser.core.result import Err, Ok, Result
from releaser.output.console import ConsoleProtocol, Style
from releaser.platform.files import atomic_write_bytes
from releaser.release.errors import ReleaseError
from releaser.release.model import FileFailure, SubstitutionReport, SubstitutionTask

_ENCODING = "utf-8"
_DECODE_ERRORS = "surrogateescape"

# Version-control metadata is never rewritten.
_SKIPPED_DIRS = frozenset({".git"})


def replace_content(content: bytes, search: str, replace: str) -> bytes:
    text = content.decode(_ENCODING, errors=_DECODE_ERRORS)
    return text.replace(search, replace).encode(_ENCODING, errors=_DECODE_ERRORS)


def iter_matching_files(
    scope: Path,
    extension: str,
    on_error: Callable[[OSError], None] | None = None,
) -> Iterator[Path]:
    """Yield regular files under scope whose name ends with extension.

    Symlinks are skipped, both to files and to directories. Directories that
    cannot be listed are passed to on_error and skipped.
    """
    for dirpath, dirnames, filenames in scope.walk(on_error=on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
        for name in sorted(filenames):
            if not name.endswith(extension):
                continue
            path = dirpath / name
            if path.is_symlink() or not path.is_file():
                continue
            yield path


def replace_in_file(
    path: Path,
    search: str,
    replace: str,
    *,
    dry_run: bool = False,
    pending: dict[Path, bytes] | None = None,
) -> bool:
    """Substitute in a single file.

    With dry_run, the file is left alone. If ``pending`` is given, the
    updated content is kept there instead, and later calls read it back in
    place of the file on disk. This lets a dry run preview a chain of
    substitutions that depend on each other.

    Returns:
        True if the content changed (and was written unless dry_run).

    Raises:
        OSError: If the file cannot be read or replaced.
    """
    original = pending[path] if pending is not None and path in pending else path.read_bytes()
    updated = replace_content(original, search, replace)
    if updated == original:
        return False
    if not dry_run:
        atomic_write_bytes(path, updated)
    elif pending is not None:
        pending[path] = updated
    return True


def replace_in_files(
    task: SubstitutionTask,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
    pending: dict[Path, bytes] | None = None,
) -> Result[SubstitutionReport, ReleaseError]:
    """Apply a substitution task to every matching file under its scope.

    Returns:
        Ok(SubstitutionReport) once the walk finished, even if single files
        failed (see ``SubstitutionReport.failed``).
        Err(ReleaseError) if the task itself is unusable.
    """
    if not task.search:
        return Err(ReleaseError(kind="invalid_input", message="search string must not be empty"))
    if not task.extension:
        return Err(ReleaseError(kind="invalid_input", message="extension filter must not be empty"))
    if not task.scope.is_dir():
        return Err(
            ReleaseError(
                kind="scope_missing",
                message=f"substitution scope is not a directory: {task.scope}",
            )
        )

    changed: list[Path] = []
    failed: list[FileFailure] = []
    unchanged = 0
    verb = "Would replace" if dry_run else "Replaced"

    def on_walk_error(error: OSError) -> None:
        console.error(f"Failed to list directory: {error.filename} ({error.strerror})")
        failed.append(FileFailure(path=Path(error.filename or task.scope), reason=str(error)))

    for path in iter_matching_files(task.scope, task.extension, on_walk_error):
        try:
            modified = replace_in_file(
                path, task.search, task.replace, dry_run=dry_run, pending=pending
            )
        except OSError as e:
            console.error(f"Failed to replace in file: {path} ({e})")
            failed.append(FileFailure(path=path, reason=str(e)))
            continue

        if modified:
            console.print(f"{verb} in file: {path}", Style.DIM)
            changed.append(path)
        else:
            unchanged += 1

    return Ok(
        SubstitutionReport(
            task=task,
            changed=tuple(changed),
            unchanged=unchanged,
            failed=tuple(failed),
        )
    )
