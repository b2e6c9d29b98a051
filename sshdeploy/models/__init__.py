"""
sshdeploy Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .config import DeploymentConfig, HookCommand
from .results import (
    ResultStatus,
    ExecutionResult,
    SSHResult,
    StageResult,
    DeploymentResult,
)

__all__ = [
    # Config
    "DeploymentConfig",
    "HookCommand",
    # Results
    "ResultStatus",
    "ExecutionResult",
    "SSHResult",
    "StageResult",
    "DeploymentResult",
]
