from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from releaser import __version__
from releaser.core.config import CONFIG_FILE_NAME, load_config, load_config_or_default
from releaser.core.errors import ErrorCode
from releaser.core.result import Err
from releaser.git.repository import Repository
from releaser.output.console import ConsoleProtocol, RichConsole, Style
from releaser.release.model import WorkflowParameters, WorkflowReport
from releaser.release.orchestrator import ReleaseOrchestrator, WorkflowOptions
from releaser.release.tool import MavenReleaseTool

USAGE = "Usage: releaser <directory> <current_version> <release_version> <next_dev_phase>"

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _exit(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def exit_code_for(report: WorkflowReport) -> ErrorCode:
    """Step failures only surface in the exit code when they stopped the run."""
    if report.fatal:
        return ErrorCode.ENV_ERROR
    if report.aborted:
        return ErrorCode.RELEASE_ERROR
    return ErrorCode.OK


def print_summary(report: WorkflowReport, console: ConsoleProtocol) -> None:
    rows = [(str(step.status), step.name, step.detail) for step in report.steps]
    console.newline()
    console.table("Release summary", ("status", "step", "detail"), rows)
    if report.aborted:
        console.error("Release workflow aborted.")
    elif report.failures:
        console.warning(f"Release workflow finished with {len(report.failures)} failed step(s).")
    else:
        console.print("Release workflow finished.", Style.SUCCESS)


@app.command()
def release(
    args: list[str] | None = typer.Argument(
        None,
        metavar="DIRECTORY CURRENT_VERSION RELEASE_VERSION NEXT_DEV_VERSION",
        help=(
            "Tree to release, the version it carries, the release version"
            " and the next development version."
        ),
        show_default=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: DIRECTORY/{CONFIG_FILE_NAME} if present).",
    ),
    scope: list[str] | None = typer.Option(
        None,
        "--scope",
        help=(
            "Directory (relative to DIRECTORY) with versions not managed by"
            " the release tool. Repeatable; replaces configured scopes."
        ),
    ),
    tool_command: str | None = typer.Option(
        None,
        "--tool-command",
        help="Release tool command line (default: mvn).",
    ),
    strict: bool = typer.Option(False, "--strict", help="Abort on the first failed step."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Report what would change without writing, committing or releasing.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Bump versions, run the release tool, and move the tree to the next development version."""
    del version
    if args is None or len(args) != 4:
        typer.echo(USAGE)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    params_result = WorkflowParameters.from_args(*args)
    if isinstance(params_result, Err):
        _exit(params_result.error.message, code=ErrorCode.USER_ERROR)
    params = params_result.value

    config_result = (
        load_config(config)
        if config is not None
        else load_config_or_default(params.root / CONFIG_FILE_NAME)
    )
    if isinstance(config_result, Err):
        _exit(config_result.error.message, code=ErrorCode.USER_ERROR)
    cfg = config_result.value

    options = WorkflowOptions.from_config(cfg, extra_scopes=scope, strict=strict, dry_run=dry_run)
    tool = MavenReleaseTool(tool_command or cfg.tool.command, skip_tests=cfg.tool.skip_tests)
    console = RichConsole()

    if dry_run:
        console.warning("dry run: nothing will be written, committed or released")

    report = ReleaseOrchestrator(
        params,
        options,
        repo=Repository(params.root),
        tool=tool,
        console=console,
    ).run()

    print_summary(report, console)
    raise typer.Exit(code=int(exit_code_for(report)))


def main() -> None:
    app()
