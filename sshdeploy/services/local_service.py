"""Local service for running shell commands on the deploying machine."""

import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Optional

from sshdeploy.constants import DEFAULT_MAX_BUFFER
from sshdeploy.exceptions import LocalExecError
from sshdeploy.models.results import ExecutionResult

logger = logging.getLogger(__name__)


class LocalRunner:
    """Runs local shell commands and surfaces their exit status."""

    def __init__(self, max_buffer: int = DEFAULT_MAX_BUFFER, cwd: Optional[Path] = None):
        """
        Initialize local runner.

        Args:
            max_buffer: Largest number of bytes allowed on stdout or stderr
            cwd: Working directory for commands (process cwd if None)
        """
        self.max_buffer = max_buffer
        self.cwd = cwd

    def run(self, command: str) -> ExecutionResult:
        """
        Run a shell command and capture its output.

        Args:
            command: Shell command line

        Returns:
            ExecutionResult with exit status and captured output

        Raises:
            LocalExecError: If the command cannot be started or its output
                exceeds max_buffer
        """
        logger.debug("Running local command: %s", command)

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self.cwd,
                capture_output=True,
            )
        except OSError as e:
            raise LocalExecError(command, reason=str(e)) from e

        for stream in (result.stdout, result.stderr):
            if len(stream) > self.max_buffer:
                raise LocalExecError(
                    command,
                    returncode=result.returncode,
                    reason=f"output exceeded max buffer of {self.max_buffer} bytes",
                )

        return ExecutionResult(
            returncode=result.returncode,
            stdout=result.stdout.decode("utf-8", errors="replace"),
            stderr=result.stderr.decode("utf-8", errors="replace"),
            command=command,
        )

    def check(self, command: str) -> ExecutionResult:
        """
        Run a command and raise if it exits nonzero.

        Raises:
            LocalExecError: On nonzero exit status
        """
        result = self.run(command)
        if result.is_failure:
            raise LocalExecError(command, returncode=result.returncode, stderr=result.stderr)
        return result


def remove_file_command(path: Path, platform: str = sys.platform) -> str:
    """Build the platform-appropriate command that deletes one file."""
    if platform == "win32":
        return f'del "{path}"'
    return f"rm {shlex.quote(str(path))}"
