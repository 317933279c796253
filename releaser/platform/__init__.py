"""Platform layer: subprocesses and file writes."""

from releaser.platform.files import atomic_write_bytes
from releaser.platform.process import ProcessError, ProcessOutput, run, stream

__all__ = [
    "ProcessError",
    "ProcessOutput",
    "atomic_write_bytes",
    "run",
    "stream",
]
