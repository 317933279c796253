"""Result type for explicit error handling.

Collaborators (git, the release tool, the file system walk) return a
``Result`` instead of raising, so the orchestrator can decide per step
whether a failure stops the release or is only logged.

Usage:
    match repository.delete_tag("1.1.0"):
        case Ok(_):
            console.success("tag deleted")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value, e.g. a git status into a yes/no answer."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[E], F]) -> Ok[T]:
        return self

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, f: Callable[[T], U]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Translate the error between layers (GitError -> ReleaseError)."""
        return Err(f(self.error))

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
