"""
Result Models

Dataclass models for operation results and command outputs.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class ResultStatus(Enum):
    """Status of an operation result."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class ExecutionResult:
    """Result of a local command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class SSHResult:
    """Result of an SSH command execution."""

    returncode: int
    stdout: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"


@dataclass
class StageResult:
    """Outcome of one pipeline stage."""

    name: str
    status: ResultStatus
    message: str = ""
    duration_seconds: float = 0.0

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE


@dataclass
class DeploymentResult:
    """Outcome of a whole deployment run."""

    host: str
    stages: List[StageResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    failed_stage: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if every stage succeeded or was skipped."""
        return self.failed_stage is None

    def add_stage(self, stage: StageResult) -> None:
        self.stages.append(stage)
        if stage.is_failure and self.failed_stage is None:
            self.failed_stage = stage.name
            self.error = stage.message

    def __repr__(self) -> str:
        status = "success" if self.is_success else f"failed at {self.failed_stage}"
        return f"DeploymentResult(host={self.host}, {status}, duration={self.duration_seconds:.2f}s)"
