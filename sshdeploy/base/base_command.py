"""
Base Command Class

Abstract base for all sshdeploy CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Any, Dict
import json
from rich.console import Console
from rich.markup import escape

from sshdeploy.core.config_loader import (
    load_options_file,
    merge_options,
    options_from_env,
    resolve_config,
)
from sshdeploy.exceptions import SSHDeployError
from sshdeploy.logger import DeployLogger
from sshdeploy.models.config import DeploymentConfig
from sshdeploy.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Config resolution (defaults < env < option file < CLI flags)
    - Logger initialization
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(
        self,
        verbose: bool = False,
        json_output: bool = False,
        log_dir: Optional[Path] = None,
    ):
        self.verbose = verbose
        self.json_output = json_output
        self.log_dir = log_dir
        self.console = Console()
        self.logger: Optional[DeployLogger] = None

    def load_config(
        self, config_file: Optional[Path], overrides: Dict[str, Any]
    ) -> DeploymentConfig:
        """
        Resolve the deployment config from every layer.

        Args:
            config_file: Optional YAML/JSON option file
            overrides: CLI flag values (None means not given)

        Returns:
            Resolved DeploymentConfig

        Raises:
            ConfigError: If the merged options are invalid
        """
        file_options = load_options_file(config_file) if config_file else {}
        return resolve_config(merge_options(options_from_env(), file_options, overrides))

    def init_logger(self, host: str, command_name: str) -> DeployLogger:
        """
        Initialize command logger.

        In JSON mode the console stays quiet and only the log file is written.

        Args:
            host: Remote host name
            command_name: Command name

        Returns:
            DeployLogger instance
        """
        output_console = Console(quiet=True) if self.json_output else self.console
        self.logger = DeployLogger(
            host,
            command_name,
            verbose=self.verbose,
            log_dir=self.log_dir,
            output_console=output_console,
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {escape(message)}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {escape(message)}[/red]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print_log_location(self) -> None:
        if self.logger and self.logger.log_path and not self.json_output:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self.print_log_location()
            raise SystemExit(130)
        except SystemExit:
            raise
        except SSHDeployError as e:
            if self.json_output:
                self.output_json(
                    {"error": e.message, "context": e.context, "stage": e.stage},
                    exit_code=1,
                )
            # Stage failures were already reported by the pipeline logger
            if e.stage is None:
                if self.logger:
                    self.logger.log_error(e.message, context=e.context)
                else:
                    self.print_error(e.message)
                    if e.context:
                        self.print_dim(e.context)
            self.print_log_location()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {escape(str(e))}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self.print_log_location()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()
