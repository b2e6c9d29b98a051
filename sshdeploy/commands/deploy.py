"""Deploy command - archive, upload and unpack the artifact on the remote host"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from sshdeploy.base import BaseCommand
from sshdeploy.commands.options import (
    collect_overrides,
    deployment_options,
    log_file_options,
)
from sshdeploy.core.pipeline import DeploymentPipeline
from sshdeploy.exceptions import SSHDeployError
from sshdeploy.models.results import DeploymentResult
from sshdeploy.ui_components import stage_summary_table


class DeployCommand(BaseCommand):
    """Deploy the local artifact to one host."""

    def __init__(
        self,
        config_file: Optional[Path],
        overrides: Dict[str, Any],
        verbose: bool = False,
        json_output: bool = False,
        log_dir: Optional[Path] = None,
    ):
        super().__init__(verbose=verbose, json_output=json_output, log_dir=log_dir)
        self.config_file = config_file
        self.overrides = overrides

    def execute(self) -> None:
        """Execute deploy command."""
        config = self.load_config(self.config_file, self.overrides)

        self.show_header(
            title="Deploy",
            details={
                "Host": f"{config.username}@{config.host}:{config.port}",
                "From": config.source,
                "To": config.target or "(not set)",
            },
        )

        logger = self.init_logger(config.host, "deploy")
        pipeline = DeploymentPipeline(config, logger)

        try:
            result = pipeline.run()
        except SSHDeployError:
            if pipeline.result.stages:
                self._show_summary(pipeline.result)
            raise

        self._show_summary(result)
        self.print_success(f"Deployed {config.source} to {config.host}:{config.target}")
        self.print_log_location()

    def _show_summary(self, result: DeploymentResult) -> None:
        if self.json_output:
            if result.is_success:
                self.output_json(_result_to_dict(result))
            return
        self.console.print()
        self.console.print(stage_summary_table(result))


def _result_to_dict(result: DeploymentResult) -> Dict[str, Any]:
    return {
        "host": result.host,
        "success": result.is_success,
        "duration_ms": int(result.duration_seconds * 1000),
        "failed_stage": result.failed_stage,
        "stages": [
            {"name": s.name, "status": s.status.value, "message": s.message}
            for s in result.stages
        ],
    }


@click.command(name="deploy")
@deployment_options
@log_file_options
def deploy(config_file, log_dir, no_log_file, verbose, json_output, **params):
    """
    Deploy a local build to a remote directory over SSH/SFTP

    This command will:
    1. Archive the local artifact (unless --no-zip)
    2. Run --before commands on the remote host
    3. Empty the remote directory (with --no-cover)
    4. Upload the artifact over SFTP
    5. Unpack the archive remotely
    6. Run --after commands
    7. Remove the local archive

    Examples:
        sshdeploy deploy -c deploy.yml
        sshdeploy deploy --host example.com -u www --private-key ~/.ssh/id_ed25519 --from dist --to /var/www/app --no-cover
        sshdeploy deploy -c deploy.yml --after "systemctl restart app" -v
    """
    cmd = DeployCommand(
        config_file,
        collect_overrides(params),
        verbose=verbose,
        json_output=json_output,
        log_dir=None if no_log_file else log_dir,
    )
    cmd.run()
