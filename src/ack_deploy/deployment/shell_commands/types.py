"""Data types for shell command results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["CommandResult", "OutputStream"]


class OutputStream(Enum):
    """Which pipe a streamed line came from."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        success: True only when the process exited with code 0
        stdout: Captured standard output
        stderr: Captured standard error
        returncode: Process exit code (127 when the executable is missing,
                    -1 when the process was killed on timeout)
        timed_out: Whether the process exceeded its timeout
    """

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    timed_out: bool = False

    @property
    def output(self) -> str:
        """Standard output and error combined, stripped."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part).strip()
