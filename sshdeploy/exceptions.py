"""
sshdeploy Exception Hierarchy

Clean exception hierarchy for consistent error handling across the pipeline.
"""

from typing import Optional


class SSHDeployError(Exception):
    """Base exception for all sshdeploy errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        # Filled in by the pipeline with the stage that raised
        self.stage: Optional[str] = None
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigError(SSHDeployError):
    """Raised when configuration is invalid or missing."""

    pass


class SessionError(SSHDeployError):
    """Raised when the SSH session cannot connect or breaks mid-run."""

    def __init__(self, host: str, cause: Exception):
        self.host = host
        self.cause = cause
        message = f"SSH session to '{host}' failed: {cause}"
        super().__init__(message, context=type(cause).__name__)


class LocalExecError(SSHDeployError):
    """Raised when a local command exits nonzero."""

    def __init__(
        self,
        command: str,
        returncode: Optional[int] = None,
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if reason is None:
            reason = f"exit status {returncode}"
        message = f"Local command failed ({reason})"
        context = f"Command: {command}"
        if stderr:
            context += f"\n{stderr.strip()}"
        super().__init__(message, context)


class TransferError(SSHDeployError):
    """Raised when the artifact cannot be uploaded."""

    PATH_NOT_FOUND = "path-not-found"
    TARGET_NOT_SET = "target-not-set"
    UNSUPPORTED_TYPE = "unsupported-type"
    UPLOAD_FAILED = "upload-failed"

    def __init__(self, reason: str, path: str, cause: Optional[Exception] = None):
        self.reason = reason
        self.path = path
        self.cause = cause
        message = f"Upload failed ({reason}): {path}"
        context = f"{type(cause).__name__}: {cause}" if cause else None
        super().__init__(message, context)


class RemoteCommandError(SSHDeployError):
    """Raised when a remote command exits nonzero or without a status."""

    def __init__(self, command: str, exit_status: Optional[int], output: str = ""):
        self.command = command
        self.exit_status = exit_status
        self.output = output
        if exit_status is None or exit_status < 0:
            status = "no exit status"
        else:
            status = f"exit status {exit_status}"
        message = f"Remote command failed ({status})"
        context = f"Command: {command}"
        if output:
            # Last lines are usually the useful ones
            tail = "\n".join(output.strip().splitlines()[-10:])
            context += f"\n{tail}"
        super().__init__(message, context)
