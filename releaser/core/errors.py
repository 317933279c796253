"""Error codes for CLI exit status.

These values are the process exit codes of the ``releaser`` command and
should remain stable:
- 0: Success (recoverable step failures are logged, not reported here)
- 1: User error (wrong arguments, invalid parameters, unreadable config)
- 2: Environment error (not a git repository, fatal step failure)
- 3: Release error (strict mode aborted the workflow)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the releaser command."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    RELEASE_ERROR = 3

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
