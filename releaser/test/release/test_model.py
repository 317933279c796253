from __future__ import annotations

from pathlib import Path

import pytest

from releaser.core.result import Err, Ok
from releaser.release.model import (
    ExternalInvocationResult,
    StepResult,
    StepStatus,
    WorkflowParameters,
    WorkflowReport,
)


class TestWorkflowParameters:
    def test_from_args(self, tmp_path: Path) -> None:
        result = WorkflowParameters.from_args(str(tmp_path), "1.0.0", "1.1.0", "1.1.1-SNAPSHOT")

        assert isinstance(result, Ok)
        params = result.value
        assert params.root == tmp_path.resolve()
        assert params.current_version == "1.0.0"
        assert params.release_version == "1.1.0"
        assert params.next_dev_version == "1.1.1-SNAPSHOT"

    def test_relative_directory_is_resolved(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "project").mkdir()
        monkeypatch.chdir(tmp_path)

        result = WorkflowParameters.from_args("project", "1", "2", "3")

        assert isinstance(result, Ok)
        assert result.value.root == (tmp_path / "project").resolve()

    def test_empty_values_are_rejected(self, tmp_path: Path) -> None:
        result = WorkflowParameters.from_args(str(tmp_path), "1.0.0", " ", "")

        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"
        assert "release_version" in result.error.message
        assert "next_dev_version" in result.error.message

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = WorkflowParameters.from_args(str(tmp_path / "nope"), "1", "2", "3")

        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"
        assert "not a directory" in result.error.message

    def test_file_is_not_a_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "pom.xml"
        path.write_text("<project/>")

        result = WorkflowParameters.from_args(str(path), "1", "2", "3")

        assert isinstance(result, Err)


def test_step_result_failed() -> None:
    assert not StepResult("a", StepStatus.SUCCESS).failed
    assert not StepResult("a", StepStatus.SKIPPED).failed
    assert StepResult("a", StepStatus.RECOVERABLE).failed
    assert StepResult("a", StepStatus.FATAL).failed


def test_workflow_report() -> None:
    report = WorkflowReport(
        steps=(
            StepResult("one", StepStatus.SUCCESS),
            StepResult("two", StepStatus.RECOVERABLE, "boom"),
            StepResult("three", StepStatus.SKIPPED),
        ),
        aborted=False,
    )

    assert [s.name for s in report.failures] == ["two"]
    assert not report.fatal


def test_invocation_result() -> None:
    assert ExternalInvocationResult(0, ()).succeeded
    assert not ExternalInvocationResult(1, ("[ERROR] BUILD FAILURE",)).succeeded
    assert str(StepStatus.RECOVERABLE) == "recoverable"
