"""Hook service for running the configured before/after remote commands."""

from typing import List, Optional

from sshdeploy.logger import DeployLogger
from sshdeploy.models.config import DeploymentConfig, HookCommand
from sshdeploy.models.results import SSHResult
from sshdeploy.services.ssh_service import OutputCallback, SSHSession


def hook_commands(hook: Optional[HookCommand]) -> List[str]:
    """Normalize a hook option (absent, one command, or a list) to a list."""
    if hook is None:
        return []
    if isinstance(hook, str):
        return [hook]
    return list(hook)


class HookRunner:
    """Runs 'before' and 'after' hooks over the command session."""

    def __init__(self, config: DeploymentConfig, session: SSHSession, logger: DeployLogger):
        self.config = config
        self.session = session
        self.logger = logger

    def run(self, phase: str) -> List[SSHResult]:
        """
        Run the hook for a phase, strictly in order.

        The first failing command raises RemoteCommandError and the
        remaining commands are never sent.

        Args:
            phase: 'before' or 'after'

        Returns:
            One SSHResult per command run (empty if no hook is configured)
        """
        results: List[SSHResult] = []
        for command in hook_commands(self.config.hook(phase)):
            self.logger.log_command(command)
            results.append(self.session.execute(command, on_output=self.output_sink()))
        return results

    def output_sink(self) -> Optional[OutputCallback]:
        """Line callback for remote output; only set when debug is on."""
        if not self.config.debug:
            return None
        return lambda line: self.logger.log_output(line, "remote")
