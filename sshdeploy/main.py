#!/usr/bin/env python3
"""sshdeploy CLI - Main entry point"""

import functools
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

import rich_click as click

from sshdeploy import __version__
from sshdeploy.commands.deploy import deploy
from sshdeploy.commands.doctor import doctor
from sshdeploy.commands.plan import plan

# Configure rich-click output
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_OPTION_DEFAULT = "dim cyan"

console = Console()


def configure_logging() -> None:
    """Route library logging (sshdeploy.*, paramiko) through rich when DEBUG is set."""
    level = logging.DEBUG if os.environ.get("DEBUG") else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""
    from click.exceptions import ClickException

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")

            if os.environ.get("DEBUG") or os.environ.get("VERBOSE"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """
    sshdeploy - Ship a local build to a remote directory over SSH/SFTP.

    \b
    Quick Start:
      sshdeploy doctor --from dist     # Check local prerequisites
      sshdeploy plan -c deploy.yml     # Show what would run
      sshdeploy deploy -c deploy.yml   # Deploy
    """


cli.add_command(deploy)
cli.add_command(plan)
cli.add_command(doctor)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
