"""
Command channel to a remote host over ssh.

Runs one shell command per call through the local `ssh` client and maps
the outcome onto the restore's exception taxonomy:

- exit status 255 (ssh's own failure), timeout, unreadable stdin file:
  TransportError
- exit status 127 (command not found on the remote side), missing local
  ssh binary: ToolUnavailable
- any other non-zero exit status: RemoteCommandError
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from auditrestore.errors import RemoteCommandError, ToolUnavailable, TransportError

logger = logging.getLogger(__name__)

SSH_FAILURE_EXIT = 255
COMMAND_NOT_FOUND_EXIT = 127


@dataclass
class CommandResult:
    """Outcome of one remote command."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class SshTransport:
    """
    Blocking ssh command runner for one host

    Args:
        host: Host name or alias understood by ssh
        user: Optional login user
        port: Optional ssh port
        ssh_options: Extra `-o` options, e.g. {"BatchMode": "yes"}
        timeout: Optional per-command timeout in seconds
        ssh_bin: ssh executable
    """

    def __init__(
        self,
        host: str,
        user: str | None = None,
        port: int | None = None,
        ssh_options: dict[str, str] | None = None,
        timeout: float | None = None,
        ssh_bin: str = "ssh",
    ):
        if not host:
            raise ValueError("Remote host cannot be empty")

        self.host = host
        self.user = user
        self.port = port
        self.ssh_options = {"BatchMode": "yes", **(ssh_options or {})}
        self.timeout = timeout
        self.ssh_bin = ssh_bin

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}" if self.user else self.host

    def build_argv(self, command: str) -> list[str]:
        """
        Build the local argv for running command on the host

        Args:
            command: Shell command to run remotely

        Returns:
            Argument vector for subprocess
        """
        argv = [self.ssh_bin]
        if self.port:
            argv += ["-p", str(self.port)]
        for key, value in self.ssh_options.items():
            argv += ["-o", f"{key}={value}"]
        argv += ["--", self.destination, command]
        return argv

    def run(self, command: str, stdin_path: Path | None = None) -> CommandResult:
        """
        Run command on the host and wait for it to finish

        Args:
            command: Shell command to run remotely
            stdin_path: Optional local file streamed to the command's stdin

        Returns:
            CommandResult of a successful command

        Raises:
            TransportError: If ssh failed, timed out or stdin_path was unreadable
            ToolUnavailable: If the ssh client or the remote command is missing
            RemoteCommandError: If the command exited non-zero
        """
        logger.debug(f"Running on {self.host}: {command}")

        if stdin_path is not None:
            try:
                stdin_file = open(stdin_path, "rb")
            except OSError as e:
                raise TransportError(
                    f"Cannot read {stdin_path} for {self.host}: {e}",
                    command=command,
                ) from e
            with stdin_file:
                completed = self._invoke(command, stdin_file)
        else:
            completed = self._invoke(command, subprocess.DEVNULL)

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
        self._check(result)
        return result

    def _invoke(self, command: str, stdin) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                self.build_argv(command),
                stdin=stdin,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise TransportError(
                f"Command on {self.host} timed out after {self.timeout}s",
                command=command,
            ) from e
        except FileNotFoundError as e:
            raise ToolUnavailable(f"ssh client not found: {self.ssh_bin}") from e

    def _check(self, result: CommandResult) -> None:
        command = result.command
        if result.returncode == SSH_FAILURE_EXIT:
            raise TransportError(
                f"ssh to {self.host} failed: {result.stderr.strip()}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        if result.returncode == COMMAND_NOT_FOUND_EXIT:
            raise ToolUnavailable(
                f"Command not available on {self.host}: {result.stderr.strip()}"
            )
        if not result.ok:
            raise RemoteCommandError(
                f"Command on {self.host} exited with status {result.returncode}: "
                f"{result.stderr.strip()}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr,
            )
