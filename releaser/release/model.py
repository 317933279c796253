from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from releaser.core.result import Err, Ok, Result
from releaser.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class WorkflowParameters:
    """Inputs of one release run. Immutable for the run."""

    root: Path
    current_version: str
    release_version: str
    next_dev_version: str

    @classmethod
    def from_args(
        cls,
        directory: str,
        current_version: str,
        release_version: str,
        next_dev_version: str,
    ) -> Result[WorkflowParameters, ReleaseError]:
        values = {
            "directory": directory,
            "current_version": current_version,
            "release_version": release_version,
            "next_dev_version": next_dev_version,
        }
        empty = [name for name, value in values.items() if not value.strip()]
        if empty:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"empty argument(s): {', '.join(empty)}",
                )
            )

        root = Path(directory).expanduser()
        if not root.is_dir():
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"not a directory: {root}",
                )
            )

        return Ok(
            cls(
                root=root.resolve(),
                current_version=current_version,
                release_version=release_version,
                next_dev_version=next_dev_version,
            )
        )


@dataclass(frozen=True, slots=True)
class SubstitutionTask:
    """Replace ``search`` by ``replace`` in files under ``scope`` ending with ``extension``."""

    scope: Path
    search: str
    replace: str
    extension: str


@dataclass(frozen=True, slots=True)
class FileFailure:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class SubstitutionReport:
    task: SubstitutionTask
    changed: tuple[Path, ...] = ()
    unchanged: int = 0
    failed: tuple[FileFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True, slots=True)
class CommitRecord:
    message: str
    # False when nothing was staged and no commit was created.
    created: bool


@dataclass(frozen=True, slots=True)
class TagSet:
    names: frozenset[str]

    @classmethod
    def of(cls, *names: str) -> TagSet:
        return cls(names=frozenset(names))

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def __str__(self) -> str:
        return ", ".join(self)


@dataclass(frozen=True, slots=True)
class ExternalInvocationResult:
    exit_code: int
    output_lines: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class StepStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"  # nothing to do, e.g. no staged changes
    RECOVERABLE = "recoverable"  # failed, the workflow may continue
    FATAL = "fatal"  # failed, the workflow must stop

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class StepResult:
    name: str
    status: StepStatus
    detail: str = ""

    @property
    def failed(self) -> bool:
        return self.status in (StepStatus.RECOVERABLE, StepStatus.FATAL)


@dataclass(frozen=True, slots=True)
class WorkflowReport:
    steps: tuple[StepResult, ...]
    aborted: bool

    @property
    def failures(self) -> tuple[StepResult, ...]:
        return tuple(step for step in self.steps if step.failed)

    @property
    def fatal(self) -> bool:
        return any(step.status is StepStatus.FATAL for step in self.steps)
