"""Release workflow: substitution engine, change recorder, tag janitor,
release tool driver and the orchestrator sequencing them."""

from releaser.release.changes import commit_changes, delete_tags
from releaser.release.errors import ReleaseError
from releaser.release.model import (
    CommitRecord,
    ExternalInvocationResult,
    StepResult,
    StepStatus,
    SubstitutionReport,
    SubstitutionTask,
    TagSet,
    WorkflowParameters,
    WorkflowReport,
)
from releaser.release.orchestrator import ReleaseOrchestrator, WorkflowOptions, should_abort
from releaser.release.substitution import replace_in_files
from releaser.release.tool import MavenReleaseTool, ReleaseToolClient, run_release

__all__ = [
    "CommitRecord",
    "ExternalInvocationResult",
    "MavenReleaseTool",
    "ReleaseError",
    "ReleaseOrchestrator",
    "ReleaseToolClient",
    "StepResult",
    "StepStatus",
    "SubstitutionReport",
    "SubstitutionTask",
    "TagSet",
    "WorkflowOptions",
    "WorkflowParameters",
    "WorkflowReport",
    "commit_changes",
    "delete_tags",
    "replace_in_files",
    "run_release",
    "should_abort",
]
