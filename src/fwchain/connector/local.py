"""Local Connector - Runs commands on the machine fwchain runs on."""

import logging
import shlex
import subprocess

from fwchain.connector.base import CommandResult, Connector

logger = logging.getLogger(__name__)

# Exit codes used by shells for these conditions
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124
EXIT_NOT_EXECUTABLE = 126


class LocalConnector(Connector):
    """Execute commands locally with subprocess, without a shell.

    Example:
        >>> with LocalConnector() as local:
        ...     result = local.execute(["iptables-save"])
        ...     print(result.stdout)
    """

    def __init__(self, timeout: float = 30) -> None:
        self.timeout = timeout

    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Execute a command line locally.

        Args:
            command: Command line, split with shell rules (no shell is spawned).
            timeout: Timeout in seconds. Defaults to the connector timeout.

        Returns:
            CommandResult. A missing binary yields exit code 127 and a
            timeout yields exit code 124.
        """
        argv = shlex.split(command)
        cmd_timeout = timeout if timeout is not None else self.timeout
        logger.debug("Running locally: %s", command)

        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=cmd_timeout,
                check=False,
            )
        except FileNotFoundError as e:
            return CommandResult(command=command, stdout="", stderr=str(e), exit_code=EXIT_NOT_FOUND)
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"Timed out after {cmd_timeout}s",
                exit_code=EXIT_TIMEOUT,
            )
        except OSError as e:
            return CommandResult(command=command, stdout="", stderr=f"Execution Error: {e}", exit_code=EXIT_NOT_EXECUTABLE)

        return CommandResult(
            command=command,
            stdout=proc.stdout,
            stderr=proc.stderr,
            exit_code=proc.returncode,
        )
