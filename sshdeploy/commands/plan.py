"""Plan command - show what deploy would do, without connecting"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from sshdeploy.base import BaseCommand
from sshdeploy.commands.options import collect_overrides, deployment_options
from sshdeploy.core.pipeline import DeploymentPipeline
from sshdeploy.ui_components import plan_table


class PlanCommand(BaseCommand):
    """Show deployment plan - stages and the commands each would issue."""

    def __init__(
        self,
        config_file: Optional[Path],
        overrides: Dict[str, Any],
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(verbose=verbose, json_output=json_output)
        self.config_file = config_file
        self.overrides = overrides

    def execute(self) -> None:
        """Execute plan command."""
        config = self.load_config(self.config_file, self.overrides)

        self.show_header(
            title="Deployment Plan",
            subtitle="No connection is opened",
            details={"Host": config.host, "From": config.source, "To": config.target or "(not set)"},
        )

        logger = self.init_logger(config.host, "plan")
        planned = DeploymentPipeline(config, logger).plan()

        if self.json_output:
            self.output_json(
                {
                    "host": config.host,
                    "stages": [
                        {"name": p.name, "skipped": p.skipped, "actions": p.actions}
                        for p in planned
                    ],
                }
            )
            return

        self.console.print(plan_table(planned))
        self.console.print()


@click.command(name="plan")
@deployment_options
def plan(config_file, verbose, json_output, **params):
    """
    Show the deployment plan without touching the remote host

    Probes the local tar dialect so the archive command shown is the one
    deploy would run.

    Examples:
        sshdeploy plan -c deploy.yml
        sshdeploy plan -c deploy.yml --no-cover --json
    """
    cmd = PlanCommand(
        config_file,
        collect_overrides(params),
        verbose=verbose,
        json_output=json_output,
    )
    cmd.run()
