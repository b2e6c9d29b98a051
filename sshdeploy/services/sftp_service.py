"""SFTP service for uploading the artifact to the remote host."""

import errno
import logging
import os
import posixpath
from pathlib import Path
from typing import Callable, List, Optional

import paramiko

from sshdeploy.exceptions import SessionError
from sshdeploy.models.config import DeploymentConfig
from sshdeploy.services.ssh_service import open_client

logger = logging.getLogger(__name__)

# Failures the upload stage reports as TransferError
TRANSFER_ERRORS = (SessionError, paramiko.SSHException, OSError, EOFError)


class TransferSession:
    """
    Short-lived SFTP session.

    Authenticates on its own transport (never shares the command session)
    and is meant to be used as a context manager, so it is closed on every
    exit path:

        with TransferSession(config) as transfer:
            transfer.upload_tree("dist", "/var/www/app")
    """

    def __init__(
        self,
        config: DeploymentConfig,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ):
        self.config = config
        self.client_factory = client_factory
        self.client: Optional[paramiko.SSHClient] = None
        self.sftp: Optional[paramiko.SFTPClient] = None

    def open(self) -> None:
        """
        Connect and start the SFTP subsystem.

        Raises:
            SessionError: On connection or authentication failure
        """
        self.client = open_client(self.config, self.client_factory)
        try:
            self.sftp = self.client.open_sftp()
        except (paramiko.SSHException, OSError):
            self.close()
            raise
        logger.info("Connected to SFTP server %s", self.config.host)

    def upload(self, local_path: Path, remote_path: str) -> str:
        """
        Upload one file.

        Args:
            local_path: Local file
            remote_path: Full remote destination path

        Returns:
            The remote path written
        """
        logger.info("Uploading file: %s to %s", local_path, remote_path)
        self.sftp.put(str(local_path), remote_path)
        return remote_path

    def upload_tree(self, local_dir: Path, remote_dir: str) -> List[str]:
        """
        Recursively upload a directory, preserving relative structure.

        Args:
            local_dir: Local directory whose contents are uploaded
            remote_dir: Remote directory receiving the contents

        Returns:
            Remote paths of the uploaded files
        """
        logger.info("Uploading directory: %s to %s", local_dir, remote_dir)
        local_dir = Path(local_dir)
        uploaded: List[str] = []

        self.ensure_remote_dir(remote_dir)

        for root, dirs, files in os.walk(local_dir):
            dirs.sort()
            relative = Path(root).relative_to(local_dir)
            remote_root = posixpath.join(remote_dir, *relative.parts)

            for name in dirs:
                self.ensure_remote_dir(posixpath.join(remote_root, name))

            for name in sorted(files):
                remote_path = posixpath.join(remote_root, name)
                self.sftp.put(str(Path(root) / name), remote_path)
                uploaded.append(remote_path)

        return uploaded

    def ensure_remote_dir(self, remote_dir: str) -> None:
        """Create a remote directory (and its parents) if missing."""
        try:
            self.sftp.stat(remote_dir)
            return
        except IOError as e:
            if getattr(e, "errno", None) not in (errno.ENOENT, None):
                raise

        parent = posixpath.dirname(remote_dir.rstrip("/"))
        if parent and parent != remote_dir:
            self.ensure_remote_dir(parent)
        self.sftp.mkdir(remote_dir)

    def close(self) -> None:
        """Close the SFTP channel and its transport. Safe to call more than once."""
        if self.sftp is not None:
            self.sftp.close()
            self.sftp = None
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("SFTP connection closed")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        self.close()
        return False
