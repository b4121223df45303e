"""SSH Connector - Read-only command execution on a remote host.

Save tools need root, so commands are wrapped in sudo unless the
session already logs in as root.
"""

from dataclasses import dataclass
from pathlib import Path

import paramiko
from paramiko.ssh_exception import AuthenticationException, SSHException

from fwchain.connector.base import CommandResult, Connector


@dataclass
class SSHConfig:
    """SSH connection configuration."""

    host: str
    user: str = "root"
    port: int = 22
    key_path: str | None = None
    password: str | None = None  # Fallback, prefer keys
    use_sudo: bool = True
    timeout: int = 30


class SSHConnector(Connector):
    """SSH connection manager for remote chain discovery.

    Example:
        >>> config = SSHConfig(host="192.168.1.100", user="deploy")
        >>> with SSHConnector(config) as ssh:
        ...     result = ssh.execute(["/sbin/iptables-save"])
        ...     print(result.stdout)
    """

    def __init__(self, config: SSHConfig) -> None:
        """Initialize SSH connector with configuration."""
        self.config = config
        self._client: paramiko.SSHClient | None = None

    def connect(self) -> None:
        """Establish SSH connection."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs: dict = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
            "timeout": self.config.timeout,
        }

        # Prefer key-based authentication
        if self.config.key_path:
            key_path = Path(self.config.key_path).expanduser()
            if key_path.exists():
                connect_kwargs["key_filename"] = str(key_path)
        elif self.config.password:
            connect_kwargs["password"] = self.config.password

        try:
            self._client.connect(**connect_kwargs)
        except AuthenticationException as e:
            raise ConnectionError(f"Authentication failed: {e}") from e
        except SSHException as e:
            raise ConnectionError(f"SSH error: {e}") from e

    def disconnect(self) -> None:
        """Close SSH connection."""
        if self._client:
            self._client.close()
            self._client = None

    def run(self, command: str, timeout: float | None = None, use_sudo: bool | None = None) -> CommandResult:
        """Execute a command on the remote server.

        Args:
            command: The command to execute.
            timeout: Command timeout in seconds. Defaults to config timeout.
            use_sudo: Whether to use sudo. Defaults to config setting.

        Returns:
            CommandResult with stdout, stderr, and exit_code.
        """
        if not self._client:
            raise RuntimeError("Not connected. Use 'with SSHConnector(config):' context.")

        if use_sudo is None:
            use_sudo = self.config.use_sudo

        if use_sudo and self.config.user != "root":
            if self.config.password:
                # -S reads the password from stdin
                command = f"sudo -S -p '' {command}"
            else:
                command = f"sudo -n {command}"

        cmd_timeout = timeout if timeout is not None else self.config.timeout

        try:
            stdin, stdout, stderr = self._client.exec_command(command, timeout=cmd_timeout)
            if use_sudo and self.config.user != "root" and self.config.password:
                stdin.write(self.config.password + "\n")
                stdin.flush()
            # Drain output before waiting on the exit status, or a dump larger
            # than the channel window stalls the remote side
            out = stdout.read().decode("utf-8", errors="replace")
            err = stderr.read().decode("utf-8", errors="replace")
            exit_code = stdout.channel.recv_exit_status()

            return CommandResult(command=command, stdout=out, stderr=err, exit_code=exit_code)
        except (SSHException, OSError) as e:
            # Timeouts and channel errors are per-command failures
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"SSH Execution Error: {e}",
                exit_code=255,
            )
