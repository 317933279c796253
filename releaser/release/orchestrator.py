"""Release workflow: bump, tag, release, bump again.

The workflow is a fixed sequence of nine steps. The first three stamp the
release version into the tree (docs and scripts, descriptors the release
tool does not manage, the scm.tag placeholder), each recorded as a commit.
The release tool then runs between two tag cleanups, and the last three
steps mirror the first three to move the tree to the next development
version.

Each step returns a ``StepResult``; whether the workflow continues after a
failed step is decided by ``should_abort``:

    status        default    strict
    SUCCESS       continue   continue
    SKIPPED       continue   continue
    RECOVERABLE   continue   abort
    FATAL         abort      abort
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from releaser.core.config import ReleaseConfig
from releaser.core.result import Err, Ok
from releaser.git.repository import RepositoryClient
from releaser.output.console import ConsoleProtocol
from releaser.release.changes import commit_changes, delete_tags
from releaser.release.errors import ReleaseError
from releaser.release.model import (
    StepResult,
    StepStatus,
    SubstitutionTask,
    TagSet,
    WorkflowParameters,
    WorkflowReport,
)
from releaser.release.substitution import replace_in_files
from releaser.release.tool import ReleaseToolClient, run_release

_FATAL_KINDS = frozenset({"not_a_repository"})

_SEVERITY = {
    StepStatus.SKIPPED: 0,
    StepStatus.SUCCESS: 1,
    StepStatus.RECOVERABLE: 2,
    StepStatus.FATAL: 3,
}


def should_abort(status: StepStatus, *, strict: bool) -> bool:
    if status is StepStatus.FATAL:
        return True
    return strict and status is StepStatus.RECOVERABLE


def status_for(error: ReleaseError) -> StepStatus:
    if error.kind in _FATAL_KINDS:
        return StepStatus.FATAL
    return StepStatus.RECOVERABLE


def _worst(statuses: Sequence[StepStatus]) -> StepStatus:
    return max(statuses, key=lambda s: _SEVERITY[s], default=StepStatus.SKIPPED)


@dataclass(frozen=True, slots=True)
class WorkflowOptions:
    """How the workflow runs, independent of the versions involved."""

    extra_scopes: tuple[str, ...]
    doc_extensions: tuple[str, ...] = (".md", ".sh")
    descriptor_extension: str = ".xml"
    tag_placeholder: str = "HEAD"
    strict: bool = False
    dry_run: bool = False

    @classmethod
    def from_config(
        cls,
        config: ReleaseConfig,
        *,
        extra_scopes: Sequence[str] | None = None,
        strict: bool = False,
        dry_run: bool = False,
    ) -> WorkflowOptions:
        """Build options from config; explicit arguments take precedence."""
        settings = config.release
        return cls(
            extra_scopes=tuple(extra_scopes) if extra_scopes else settings.extra_scopes,
            doc_extensions=settings.doc_extensions,
            descriptor_extension=settings.descriptor_extension,
            tag_placeholder=settings.tag_placeholder,
            strict=strict or settings.strict,
            dry_run=dry_run,
        )


@dataclass(frozen=True, slots=True)
class Step:
    name: str
    title: str
    run: Callable[[], StepResult]


class ReleaseOrchestrator:
    """Sequences substitutions, commits, tag cleanups and the release tool."""

    def __init__(
        self,
        params: WorkflowParameters,
        options: WorkflowOptions,
        *,
        repo: RepositoryClient,
        tool: ReleaseToolClient,
        console: ConsoleProtocol,
    ) -> None:
        self._params = params
        self._options = options
        self._repo = repo
        self._tool = tool
        self._console = console
        # Dry runs keep would-be file contents here so later steps see earlier bumps.
        self._pending: dict[Path, bytes] = {}

    def plan(self) -> tuple[Step, ...]:
        p = self._params
        current, release, next_dev = p.current_version, p.release_version, p.next_dev_version
        floating = self._scm_tag(self._options.tag_placeholder)
        pinned = self._scm_tag(release)
        tags = TagSet.of(release, next_dev)

        return (
            Step(
                "bump-docs-release",
                f"Bump docs and scripts to {release}",
                lambda: self._bump_docs("bump-docs-release", current, release),
            ),
            Step(
                "bump-unmanaged-release",
                f"Bump versions not managed by release tool to {release}",
                lambda: self._bump_unmanaged("bump-unmanaged-release", current, release),
            ),
            Step(
                "pin-scm-tag",
                f"Set scm.tag to {release}",
                lambda: self._set_scm_tag("pin-scm-tag", floating, pinned, release),
            ),
            Step(
                "delete-tags-before",
                f"Delete tags {tags}",
                lambda: self._delete_tags("delete-tags-before", tags),
            ),
            Step(
                "release-tool",
                f"Run {self._tool.name} release",
                lambda: self._release("release-tool"),
            ),
            Step(
                "delete-tags-after",
                f"Delete tags {tags}",
                lambda: self._delete_tags("delete-tags-after", tags),
            ),
            Step(
                "bump-docs-next",
                f"Bump docs and scripts to {next_dev}",
                lambda: self._bump_docs("bump-docs-next", release, next_dev),
            ),
            Step(
                "bump-unmanaged-next",
                f"Bump versions not managed by release tool to {next_dev}",
                lambda: self._bump_unmanaged("bump-unmanaged-next", release, next_dev),
            ),
            Step(
                "unpin-scm-tag",
                f"Set scm.tag to {self._options.tag_placeholder}",
                lambda: self._set_scm_tag(
                    "unpin-scm-tag", pinned, floating, self._options.tag_placeholder
                ),
            ),
        )

    def run(self) -> WorkflowReport:
        # Every step commits or touches tags; refuse before the first file is rewritten.
        if not self._repo.exists():
            message = f"not a git repository: {self._repo.path}"
            self._console.error(message)
            check = StepResult("check-repository", StepStatus.FATAL, message)
            return WorkflowReport(steps=(check,), aborted=True)

        steps = self.plan()
        results: list[StepResult] = []

        for index, step in enumerate(steps, start=1):
            self._console.header(f"[{index}/{len(steps)}] {step.title}")
            result = step.run()
            results.append(result)
            if should_abort(result.status, strict=self._options.strict):
                self._console.error(f"Aborting release workflow after step {step.name}")
                return WorkflowReport(steps=tuple(results), aborted=True)

        return WorkflowReport(steps=tuple(results), aborted=False)

    # Steps

    def _bump_docs(self, name: str, search: str, replace: str) -> StepResult:
        root = self._params.root
        tasks = [
            SubstitutionTask(scope=root, search=search, replace=replace, extension=ext)
            for ext in self._options.doc_extensions
        ]
        return self._substitute_and_commit(name, tasks, f"Bump docs and scripts to {replace}")

    def _bump_unmanaged(self, name: str, search: str, replace: str) -> StepResult:
        root = self._params.root
        tasks = [
            SubstitutionTask(
                scope=root / scope,
                search=search,
                replace=replace,
                extension=self._options.descriptor_extension,
            )
            for scope in self._options.extra_scopes
        ]
        return self._substitute_and_commit(
            name, tasks, f"Bump versions not managed by release tool to {replace}"
        )

    def _set_scm_tag(self, name: str, search: str, replace: str, label: str) -> StepResult:
        task = SubstitutionTask(
            scope=self._params.root,
            search=search,
            replace=replace,
            extension=self._options.descriptor_extension,
        )
        return self._substitute_and_commit(name, [task], f"Set scm.tag to {label}")

    def _delete_tags(self, name: str, tags: TagSet) -> StepResult:
        result = delete_tags(self._repo, tags, self._console, dry_run=self._options.dry_run)
        match result:
            case Err(e):
                return StepResult(name, status_for(e), e.message)
            case Ok(deleted) if deleted:
                return StepResult(name, StepStatus.SUCCESS, f"deleted {', '.join(deleted)}")
            case Ok(_):
                return StepResult(name, StepStatus.SKIPPED, "no tags to delete")

    def _release(self, name: str) -> StepResult:
        result = run_release(
            root=self._params.root,
            release_version=self._params.release_version,
            next_dev_version=self._params.next_dev_version,
            tool=self._tool,
            console=self._console,
            dry_run=self._options.dry_run,
        )
        match result:
            case Err(e):
                return StepResult(name, status_for(e), e.message)
            case Ok(invocation):
                return StepResult(
                    name, StepStatus.SUCCESS, f"{len(invocation.output_lines)} line(s) of output"
                )

    def _substitute_and_commit(
        self, name: str, tasks: Sequence[SubstitutionTask], message: str
    ) -> StepResult:
        statuses: list[StepStatus] = []
        notes: list[str] = []
        changed = 0

        for task in tasks:
            result = replace_in_files(
                task, self._console, dry_run=self._options.dry_run, pending=self._pending
            )
            match result:
                case Err(e):
                    self._console.error(e.message)
                    statuses.append(status_for(e))
                    notes.append(e.message)
                case Ok(report):
                    changed += len(report.changed)
                    if not report.ok:
                        statuses.append(StepStatus.RECOVERABLE)
                        where = _rel(task.scope, self._params.root)
                        notes.append(f"{len(report.failed)} file(s) failed under {where}")

        committed = commit_changes(self._repo, message, self._console, dry_run=self._options.dry_run)
        match committed:
            case Err(e):
                self._console.error(e.message)
                statuses.append(status_for(e))
                notes.append(e.message)
            case Ok(record) if record.created:
                statuses.append(StepStatus.SUCCESS)
            case Ok(_):
                statuses.append(StepStatus.SKIPPED)

        notes.insert(0, f"{changed} file(s) changed")
        return StepResult(name, _worst(statuses), "; ".join(notes))

    @staticmethod
    def _scm_tag(value: str) -> str:
        return f"<tag>{value}</tag>"


def _rel(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
