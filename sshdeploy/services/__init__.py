"""
sshdeploy Services Layer

Local and remote operations used by the deployment pipeline.
"""

from .local_service import LocalRunner
from .archive_service import ArchiveService, TarDialect
from .ssh_service import SSHSession, SessionState
from .sftp_service import TransferSession
from .hook_service import HookRunner

__all__ = [
    "LocalRunner",
    "ArchiveService",
    "TarDialect",
    "SSHSession",
    "SessionState",
    "TransferSession",
    "HookRunner",
]
