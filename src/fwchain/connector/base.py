"""Connector base - The command executor every scanner talks through.

Connectors are read-only by contract: fwchain only ever asks a host which
tools it has and what its save tools print.
"""

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    stdout: str
    stderr: str
    exit_code: int
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.exit_code == 0


class Connector(ABC):
    """Abstract command executor for a single host."""

    @abstractmethod
    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Run a command line and capture its output.

        Implementations never raise for a failing command; the failure is
        reported through the returned exit code.
        """
        ...

    def execute(self, argv: list[str], timeout: float | None = None) -> CommandResult:
        """Run an argument vector, quoting each element."""
        return self.run(shlex.join(argv), timeout=timeout)

    def read_file(self, path: str) -> str | None:
        """Read a file, or None if it cannot be read."""
        result = self.execute(["cat", path])
        if result.success:
            return result.stdout
        return None

    def connect(self) -> None:
        """Open the underlying transport, if any."""

    def disconnect(self) -> None:
        """Close the underlying transport, if any."""

    def __enter__(self) -> "Connector":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()
