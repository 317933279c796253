"""Console output abstraction.

Every component reports progress through ``ConsoleProtocol`` instead of
printing directly. ``RichConsole`` is the production backend and
``MockConsole`` records output for tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # release tool output
    HEADER = auto()  # one per workflow step

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Where the workflow reports progress."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print a table with one string per cell."""
        ...

    def newline(self) -> None: ...


class RichConsole:
    """Terminal output through rich."""

    _PREFIXES = {
        Style.SUCCESS: "[green]OK[/green]",
        Style.ERROR: "[red bold]error:[/red bold]",
        Style.WARNING: "[yellow]warning:[/yellow]",
        Style.INFO: "[cyan]info:[/cyan]",
    }
    _COLORS = {
        Style.SUCCESS: "green",
        Style.ERROR: "red bold",
        Style.WARNING: "yellow",
        Style.INFO: "cyan",
        Style.DIM: "dim",
        Style.HEADER: "blue bold",
    }

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        # Tool output routinely contains "[INFO]"; it must not be parsed as markup.
        self._console.print(message, style=self._COLORS.get(style), markup=False)

    def success(self, message: str) -> None:
        self._prefixed(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._prefixed(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._prefixed(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._prefixed(Style.INFO, message)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        from rich.markup import escape
        from rich.table import Table

        table = Table(title=title, title_justify="left")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._console.print(table)

    def newline(self) -> None:
        self._console.print()

    def _prefixed(self, style: Style, message: str) -> None:
        from rich.markup import escape

        self._console.print(f"{self._PREFIXES[style]} {escape(message)}")


@dataclass
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records output instead of printing it.

    Shorthand methods keep a plain-text prefix ("error: ...") so tests can
    match messages the way they read on a terminal.
    """

    outputs: list[OutputRecord] = field(default_factory=list)

    _PREFIXES: ClassVar[dict[Style, str]] = {
        Style.SUCCESS: "OK ",
        Style.ERROR: "error: ",
        Style.WARNING: "warning: ",
        Style.INFO: "info: ",
    }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._prefixed(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._prefixed(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._prefixed(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._prefixed(Style.INFO, message)

    def header(self, message: str) -> None:
        self.print(message, Style.HEADER)

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.header(title)
        for row in rows:
            self.print(" | ".join(row))

    def newline(self) -> None:
        self.print("")

    def _prefixed(self, style: Style, message: str) -> None:
        self.print(self._PREFIXES[style] + message, style)

    # Assertion helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    def has_error(self) -> bool:
        return self.count(Style.ERROR) > 0

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style is style)
