"""External release tool driver.

The release tool is opaque: it is asked to ``clean`` and to ``prepare`` a
release, and only its exit code and output are observed. ``prepare`` runs
between two ``clean`` invocations, all three unconditionally.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from releaser.core.result import Err, Ok, Result
from releaser.output.console import ConsoleProtocol, Style
from releaser.platform.process import stream
from releaser.release.errors import ReleaseError
from releaser.release.model import ExternalInvocationResult

LineSink = Callable[[str], None]


class ReleaseToolClient(Protocol):
    """The release-tool capabilities the workflow consumes."""

    @property
    def name(self) -> str: ...

    def clean(self, root: Path, on_line: LineSink) -> Result[ExternalInvocationResult, ReleaseError]: ...

    def prepare(
        self,
        root: Path,
        release_version: str,
        next_dev_version: str,
        on_line: LineSink,
    ) -> Result[ExternalInvocationResult, ReleaseError]: ...


class MavenReleaseTool:
    """maven-release-plugin driven non-interactively.

    ``release:prepare`` prompts for the release version; the answer is fed
    through stdin while the next development version is passed as a property.
    """

    def __init__(self, command: str = "mvn", *, skip_tests: bool = True) -> None:
        self._command = shlex.split(command)
        self._skip_tests = skip_tests

    @property
    def name(self) -> str:
        return " ".join(self._command)

    def clean_command(self) -> list[str]:
        return [*self._command, "release:clean"]

    def prepare_command(self, next_dev_version: str) -> list[str]:
        cmd = [*self._command, "release:prepare"]
        if self._skip_tests:
            cmd.append("-Darguments=-DskipTests")
        cmd.append(f"-DdevelopmentVersion={next_dev_version}")
        return cmd

    def clean(self, root: Path, on_line: LineSink) -> Result[ExternalInvocationResult, ReleaseError]:
        return self._invoke(self.clean_command(), root, on_line, input_text=None)

    def prepare(
        self,
        root: Path,
        release_version: str,
        next_dev_version: str,
        on_line: LineSink,
    ) -> Result[ExternalInvocationResult, ReleaseError]:
        return self._invoke(
            self.prepare_command(next_dev_version),
            root,
            on_line,
            input_text=f"{release_version}\n",
        )

    def _invoke(
        self,
        cmd: list[str],
        root: Path,
        on_line: LineSink,
        *,
        input_text: str | None,
    ) -> Result[ExternalInvocationResult, ReleaseError]:
        result = stream(cmd, cwd=root, input_text=input_text, on_line=on_line)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="tool_launch_failed",
                    message=f"failed to run {' '.join(cmd[:2])}",
                    hint=result.error.stderr or None,
                )
            )
        output = result.value
        return Ok(ExternalInvocationResult(exit_code=output.returncode, output_lines=output.lines))


def _run_clean(
    tool: ReleaseToolClient,
    root: Path,
    console: ConsoleProtocol,
    on_line: LineSink,
) -> None:
    result = tool.clean(root, on_line)
    match result:
        case Err(e):
            console.error(f"{e.message}" + (f" ({e.hint})" if e.hint else ""))
        case Ok(invocation) if invocation.succeeded:
            console.success(f"{tool.name} release:clean completed successfully.")
        case Ok(invocation):
            console.warning(f"{tool.name} release:clean failed with exit code: {invocation.exit_code}")


def run_release(
    *,
    root: Path,
    release_version: str,
    next_dev_version: str,
    tool: ReleaseToolClient,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[ExternalInvocationResult, ReleaseError]:
    """Run clean, prepare, clean.

    Clean failures are only logged. The result reflects ``prepare``: Err if
    it could not be launched or exited non-zero.
    """
    if dry_run:
        console.info(f"Would run {tool.name} release:clean, release:prepare, release:clean")
        return Ok(ExternalInvocationResult(exit_code=0, output_lines=()))

    def on_line(line: str) -> None:
        console.print(line, Style.DIM)

    _run_clean(tool, root, console, on_line)

    console.info(f"Running {tool.name} release:prepare ({release_version} -> {next_dev_version})")
    prepared = tool.prepare(root, release_version, next_dev_version, on_line)
    outcome: Result[ExternalInvocationResult, ReleaseError]
    match prepared:
        case Err(e):
            console.error(f"Failed to run {tool.name} release:prepare: {e.message}")
            outcome = prepared
        case Ok(invocation) if invocation.succeeded:
            console.success(f"{tool.name} release:prepare completed successfully.")
            outcome = prepared
        case Ok(invocation):
            console.error(
                f"{tool.name} release:prepare failed with exit code: {invocation.exit_code}"
            )
            outcome = Err(
                ReleaseError(
                    kind="tool_failed",
                    message=f"release:prepare exited with {invocation.exit_code}",
                )
            )

    _run_clean(tool, root, console, on_line)
    return outcome
