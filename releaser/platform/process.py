"""Subprocess execution with Result-based error handling.

Two flavors:
- ``run`` captures output; used for short git commands.
- ``stream`` merges stdout and stderr, forwards each line as it arrives,
  and optionally answers the process's prompt through stdin; used for
  long-running release tool invocations.

Usage:
    result = run(["git", "tag", "--list"], cwd=root)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from releaser.core.result import Err, Ok, Result

__all__ = ["ProcessError", "ProcessOutput", "run", "stream"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be run or exited non-zero.

    ``returncode`` is -1 when the process never started or timed out; ``stderr``
    then carries the reason instead of the process's own output.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        head = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        return f"{head} failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    """Exit code and merged output lines of a streamed process."""

    returncode: int
    lines: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def _not_completed(cmd: list[str], reason: str) -> ProcessError:
    return ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=reason)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run a short command to completion and capture its output.

    Returns:
        Ok(stdout) when the command exits 0. Err(ProcessError) on a non-zero
        exit, on timeout, or when the executable cannot be started.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(_not_completed(cmd, f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(_not_completed(cmd, str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def stream(
    cmd: list[str],
    cwd: Path,
    *,
    input_text: str | None = None,
    on_line: Callable[[str], None] | None = None,
    env: dict[str, str] | None = None,
) -> Result[ProcessOutput, ProcessError]:
    """Execute a command, forwarding its merged output line by line.

    Output is drained before waiting for exit, so a chatty process cannot
    block on a full pipe. There is no timeout: a hung process hangs the caller.

    Args:
        input_text: Written to stdin, which is then closed. If None, stdin
            is /dev/null so the process cannot wait for interactive input.
        on_line: Called with every output line (without line terminator).

    Returns:
        Ok(ProcessOutput) once the process exited, whatever its exit code.
        Err(ProcessError) only if the process could not be started.
    """
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.PIPE if input_text is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        return Err(_not_completed(cmd, str(e)))

    if input_text is not None and proc.stdin is not None:
        try:
            proc.stdin.write(input_text)
            proc.stdin.close()
        except BrokenPipeError:
            # The process exited without reading its answer; its exit code tells the rest.
            pass

    lines: list[str] = []
    if proc.stdout is not None:
        with proc.stdout:
            for raw in proc.stdout:
                line = raw.rstrip("\r\n")
                lines.append(line)
                if on_line is not None:
                    on_line(line)

    returncode = proc.wait()
    return Ok(ProcessOutput(returncode=returncode, lines=tuple(lines)))
