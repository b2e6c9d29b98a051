"""Archive service for packaging the local artifact before upload."""

import logging
import shlex
from enum import Enum
from typing import Optional

from sshdeploy.constants import ARCHIVE_NAME, GNU_TAR_MARKER, TAR_VERSION_COMMAND
from sshdeploy.models.config import DeploymentConfig
from sshdeploy.models.results import ExecutionResult
from sshdeploy.services.local_service import LocalRunner, remove_file_command

logger = logging.getLogger(__name__)


class TarDialect(Enum):
    """Flag dialect of the local tar binary."""

    GNU = "gnu"
    BSD = "bsd"


class ArchiveService:
    """Builds and runs the tar commands for the deploy archive."""

    def __init__(self, config: DeploymentConfig, runner: LocalRunner):
        self.config = config
        self.runner = runner
        self._dialect: Optional[TarDialect] = None

    def detect_dialect(self) -> TarDialect:
        """
        Probe the local tar binary.

        Returns:
            TarDialect.GNU if `tar --version` mentions GNU tar, else BSD

        Raises:
            LocalExecError: If tar cannot be run
        """
        if self._dialect is None:
            result = self.runner.check(TAR_VERSION_COMMAND)
            self._dialect = self.dialect_from_version(result.stdout)
            logger.debug("Detected tar dialect: %s", self._dialect.value)
        return self._dialect

    @staticmethod
    def dialect_from_version(version_output: str) -> TarDialect:
        """Classify `tar --version` output."""
        if GNU_TAR_MARKER in version_output:
            return TarDialect.GNU
        return TarDialect.BSD

    def build_create_command(self, dialect: TarDialect) -> str:
        """
        Build the archive creation command.

        Args:
            dialect: Local tar dialect

        Returns:
            Shell command that writes the archive into the source directory
        """
        source = shlex.quote(self.config.source)
        archive = shlex.quote(str(self.config.archive_path))

        parts = [f"tar -czvf {archive}"]
        for pattern in self.config.exclude:
            parts.append(f"--exclude={shlex.quote(pattern)}")

        # GNU tar needs to be told to skip its own output and unreadable files
        if dialect == TarDialect.GNU:
            parts.append(f"--exclude={ARCHIVE_NAME}")
            parts.append("--ignore-failed-read")

        parts.append(f"--directory={source} .")
        return " ".join(parts)

    def build_delete_command(self) -> str:
        """Build the local archive removal command."""
        return remove_file_command(self.config.archive_path)

    def create_command(self) -> str:
        """Build the creation command for the detected local dialect."""
        return self.build_create_command(self.detect_dialect())

    def create(self) -> ExecutionResult:
        """
        Create the archive.

        Raises:
            LocalExecError: If tar fails
        """
        return self.runner.check(self.create_command())

