"""
Deployment Configuration Model

Dataclass model for a fully resolved deployment run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from sshdeploy.constants import (
    ARCHIVE_NAME,
    DEFAULT_MAX_BUFFER,
    DEFAULT_READY_TIMEOUT,
    DEFAULT_SOURCE,
    DEFAULT_SSH_PORT,
)

HookCommand = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class DeploymentConfig:
    """Resolved deployment configuration. Immutable once the pipeline starts."""

    host: str
    username: str
    port: int = DEFAULT_SSH_PORT
    password: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = None
    source: str = DEFAULT_SOURCE
    target: Optional[str] = None
    zip: bool = True
    exclude: Tuple[str, ...] = ()
    before: Optional[HookCommand] = None
    after: Optional[HookCommand] = None
    cover: bool = True
    debug: bool = False
    max_buffer: int = DEFAULT_MAX_BUFFER
    ready_timeout: float = DEFAULT_READY_TIMEOUT

    @property
    def archive_path(self) -> Path:
        """Local archive location (inside the source directory)."""
        return Path(self.source) / ARCHIVE_NAME

    @property
    def uses_private_key(self) -> bool:
        """Check if key authentication is used (takes precedence over password)."""
        return bool(self.private_key)

    def hook(self, phase: str) -> Optional[HookCommand]:
        """Get the 'before' or 'after' hook."""
        if phase not in ("before", "after"):
            raise ValueError(f"Unknown hook phase: {phase}")
        return getattr(self, phase)

    def __repr__(self) -> str:
        # Never print credentials
        auth = "key" if self.uses_private_key else "password"
        return (
            f"DeploymentConfig(host={self.host}, user={self.username}, "
            f"auth={auth}, from={self.source}, to={self.target})"
        )
