from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: Literal[
        "invalid_input",
        "scope_missing",
        "not_a_repository",
        "git_failed",
        "tool_launch_failed",
        "tool_failed",
    ]
    message: str
    hint: str | None = None
