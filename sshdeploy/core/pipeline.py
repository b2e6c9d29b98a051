"""
Deployment pipeline

Runs the deploy stages strictly in order over one SSH session:

    zip_local -> before_deploy -> clean_remote -> upload -> unzip_remote
    -> after_deploy -> delete_local_zip

The first failing stage stops the run. Whatever happens after the session
is connected, close_connection() runs exactly once before the result or
the error reaches the caller. Nothing is rolled back on the remote side.
"""

import posixpath
import shlex
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from sshdeploy.constants import (
    ARCHIVE_NAME,
    STAGE_AFTER_DEPLOY,
    STAGE_BEFORE_DEPLOY,
    STAGE_CLEAN_REMOTE,
    STAGE_DELETE_LOCAL_ZIP,
    STAGE_TITLES,
    STAGE_UNZIP_REMOTE,
    STAGE_UPLOAD,
    STAGE_ZIP_LOCAL,
)
from sshdeploy.exceptions import SSHDeployError, TransferError
from sshdeploy.logger import DeployLogger
from sshdeploy.models.config import DeploymentConfig
from sshdeploy.models.results import (
    DeploymentResult,
    ExecutionResult,
    ResultStatus,
    StageResult,
)
from sshdeploy.services.archive_service import ArchiveService
from sshdeploy.services.hook_service import HookRunner, hook_commands
from sshdeploy.services.local_service import LocalRunner
from sshdeploy.services.sftp_service import TRANSFER_ERRORS, TransferSession
from sshdeploy.services.ssh_service import SSHSession

# A stage returns a short success message, or None when it had nothing to do
Stage = Callable[[], Optional[str]]


def clean_remote_command(target: str) -> str:
    """
    Command that empties the remote target directory, dotfiles included.

    A target that does not exist yet is left alone; the upload creates it.
    Unmatched globs stay literal and `rm -f` ignores them.
    """
    quoted = shlex.quote(target)
    return f"if [ -d {quoted} ]; then cd {quoted} && rm -fr ./* ./.[!.]* ./..?*; fi"


def unzip_remote_command(target: str) -> str:
    """Command that unpacks the uploaded archive and deletes it remotely."""
    # Paths after the cd are relative to the target
    return " && ".join(
        [
            f"cd {shlex.quote(target)}",
            f"tar -xzvf {ARCHIVE_NAME}",
            f"rm {ARCHIVE_NAME}",
        ]
    )


@dataclass
class PlannedStage:
    """What one stage would do, without doing it."""

    name: str
    title: str
    actions: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return not self.actions


class DeploymentPipeline:
    """Orchestrates one deployment run against one host."""

    def __init__(
        self,
        config: DeploymentConfig,
        logger: DeployLogger,
        session: Optional[SSHSession] = None,
        runner: Optional[LocalRunner] = None,
        transfer_factory: Callable[[DeploymentConfig], TransferSession] = TransferSession,
    ):
        """
        Initialize pipeline.

        Args:
            config: Resolved deployment configuration
            logger: Run logger (console + log file)
            session: Command session (built from config if None)
            runner: Local process runner (built from config if None)
            transfer_factory: Builds the transfer session for the upload stage
        """
        self.config = config
        self.logger = logger
        self.session = session or SSHSession(config)
        self.runner = runner or LocalRunner(max_buffer=config.max_buffer)
        self.transfer_factory = transfer_factory
        self.archiver = ArchiveService(config, self.runner)
        self.hooks = HookRunner(config, self.session, logger)
        self.result = DeploymentResult(host=config.host)

    def stages(self) -> List[Tuple[str, Stage]]:
        """Stages in execution order."""
        return [
            (STAGE_ZIP_LOCAL, self.zip_local),
            (STAGE_BEFORE_DEPLOY, self.before_deploy),
            (STAGE_CLEAN_REMOTE, self.clean_remote),
            (STAGE_UPLOAD, self.upload),
            (STAGE_UNZIP_REMOTE, self.unzip_remote),
            (STAGE_AFTER_DEPLOY, self.after_deploy),
            (STAGE_DELETE_LOCAL_ZIP, self.delete_local_zip),
        ]

    def run(self) -> DeploymentResult:
        """
        Connect, run every stage, and close the session.

        Returns:
            DeploymentResult with one entry per stage

        Raises:
            SessionError: If the initial connection fails (nothing to clean up)
            SSHDeployError: The first stage failure, with .stage set, raised
                after the session has been closed
        """
        start_time = time.time()

        self.logger.step(f"Connecting to {self.config.host}")
        self.session.connect()
        self.logger.success(f"Connected: {self.config.host}")

        try:
            for name, stage in self.stages():
                self._run_stage(name, stage)
        finally:
            self.close_connection()
            self.result.duration_seconds = time.time() - start_time

        self.logger.success(f"Deployed: {int(self.result.duration_seconds * 1000)}ms")
        return self.result

    def _run_stage(self, name: str, stage: Stage) -> None:
        title = STAGE_TITLES[name]
        self.logger.step(title)
        started = time.time()

        try:
            message = stage()
        except SSHDeployError as e:
            e.stage = name
            self.result.add_stage(
                StageResult(name, ResultStatus.FAILURE, e.message, time.time() - started)
            )
            self.logger.log_error(f"{title} failed: {e.message}", context=e.context)
            raise

        if message is None:
            self.result.add_stage(StageResult(name, ResultStatus.SKIPPED, "nothing to do"))
            self.logger.log(f"Skipped: {name}", "DEBUG")
        else:
            self.result.add_stage(
                StageResult(name, ResultStatus.SUCCESS, message, time.time() - started)
            )
            self.logger.success(message)

    def close_connection(self) -> None:
        """Tear down the command session."""
        self.session.close()
        self.logger.log(f"Closed: {self.config.host}")

    # Stages

    def zip_local(self) -> Optional[str]:
        if not self.config.zip:
            return None
        self.logger.log_command(self.archiver.create_command())
        self._log_local_output(self.archiver.create())
        return f"Archive created: {self.config.archive_path}"

    def before_deploy(self) -> Optional[str]:
        return self._run_hook("before")

    def clean_remote(self) -> Optional[str]:
        if not self.config.target or self.config.cover:
            return None
        command = clean_remote_command(self.config.target)
        self._run_remote(command)
        return f"Remote directory cleaned: {self.config.target}"

    def upload(self) -> Optional[str]:
        source = Path(self.config.source)
        target = self.config.target

        # Checked before any transfer session is opened
        if not source.exists():
            raise TransferError(TransferError.PATH_NOT_FOUND, str(source))
        if not target:
            raise TransferError(TransferError.TARGET_NOT_SET, str(source))
        if not (source.is_dir() or source.is_file()):
            raise TransferError(TransferError.UNSUPPORTED_TYPE, str(source))

        try:
            with self.transfer_factory(self.config) as transfer:
                if source.is_dir():
                    self.logger.log(f"Uploading directory: {source} to {target}")
                    transfer.upload_tree(source, target)
                    return f"Uploaded directory {source} to {target}"

                remote_path = posixpath.join(target, source.name)
                self.logger.log(f"Uploading file: {source} to {remote_path}")
                transfer.upload(source, remote_path)
                return f"Uploaded file {source} to {remote_path}"
        except TRANSFER_ERRORS as e:
            raise TransferError(TransferError.UPLOAD_FAILED, str(source), cause=e) from e

    def unzip_remote(self) -> Optional[str]:
        if not self.config.zip:
            return None
        self._run_remote(unzip_remote_command(self.config.target))
        return f"Archive unpacked in {self.config.target}"

    def after_deploy(self) -> Optional[str]:
        return self._run_hook("after")

    def delete_local_zip(self) -> Optional[str]:
        if not self.config.zip:
            return None
        self._run_local(self.archiver.build_delete_command())
        return f"Archive removed: {self.config.archive_path}"

    # Helpers

    def _run_hook(self, phase: str) -> Optional[str]:
        if self.config.hook(phase) is None:
            return None
        results = self.hooks.run(phase)
        return f"{phase.capitalize()} deploy: {len(results)} command(s) completed"

    def _run_remote(self, command: str) -> None:
        self.logger.log_command(command)
        self.session.execute(command, on_output=self.hooks.output_sink())

    def _run_local(self, command: str) -> None:
        self.logger.log_command(command)
        self._log_local_output(self.runner.check(command))

    def _log_local_output(self, result: ExecutionResult) -> None:
        if self.config.debug:
            self.logger.log_output(result.stdout, "stdout")
            self.logger.log_output(result.stderr, "stderr")

    # Dry run

    def plan(self) -> List[PlannedStage]:
        """
        Describe what run() would do, without connecting.

        Probes the local tar dialect when archiving is enabled.
        """
        config = self.config
        planned = [PlannedStage(name, STAGE_TITLES[name]) for name, _ in self.stages()]
        by_name = {p.name: p for p in planned}

        if config.zip:
            by_name[STAGE_ZIP_LOCAL].actions.append(self.archiver.create_command())
            by_name[STAGE_UNZIP_REMOTE].actions.append(
                unzip_remote_command(config.target or ".")
            )
            by_name[STAGE_DELETE_LOCAL_ZIP].actions.append(
                self.archiver.build_delete_command()
            )

        by_name[STAGE_BEFORE_DEPLOY].actions.extend(hook_commands(config.before))
        by_name[STAGE_AFTER_DEPLOY].actions.extend(hook_commands(config.after))

        if config.target and not config.cover:
            by_name[STAGE_CLEAN_REMOTE].actions.append(clean_remote_command(config.target))

        source = Path(config.source)
        kind = "directory" if source.is_dir() else "file"
        by_name[STAGE_UPLOAD].actions.append(
            f"sftp upload {kind} {source} -> {config.target or '(target not set)'}"
        )
        return planned
