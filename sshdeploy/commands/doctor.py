"""sshdeploy - Doctor command"""

import shutil
from pathlib import Path

import click
from rich.table import Table

from sshdeploy.base import BaseCommand
from sshdeploy.constants import DEFAULT_SOURCE, REQUIRED_TOOLS, TAR_VERSION_COMMAND
from sshdeploy.exceptions import LocalExecError
from sshdeploy.services.archive_service import ArchiveService, TarDialect
from sshdeploy.services.local_service import LocalRunner


class DoctorCommand(BaseCommand):
    """Local health check before deploying."""

    def __init__(self, source: str, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.source = source
        self.runner = LocalRunner()
        self.failures = 0
        self.table = Table(
            title="System Health Report", title_justify="left", padding=(0, 1)
        )
        self.table.add_column("Check", style="cyan", no_wrap=True)
        self.table.add_column("Status")
        self.table.add_column("Details", style="dim")

    def check_tools(self) -> None:
        """Check required tools installation."""
        for tool in REQUIRED_TOOLS:
            path = shutil.which(tool)
            if path:
                self.table.add_row(f"✅ {tool}", "[green]Installed[/green]", path)
            else:
                self.failures += 1
                self.table.add_row(f"❌ {tool}", "[red]Missing[/red]", "")

    def check_tar_dialect(self) -> None:
        """Report which tar flags the archive stage will use."""
        try:
            result = self.runner.check(TAR_VERSION_COMMAND)
        except LocalExecError as e:
            self.failures += 1
            self.table.add_row("❌ tar dialect", "[red]Unknown[/red]", e.message)
            return

        dialect = ArchiveService.dialect_from_version(result.stdout)
        first_line = result.stdout.strip().splitlines()[0] if result.stdout.strip() else ""
        if dialect == TarDialect.GNU:
            self.table.add_row("✅ tar dialect", "[green]GNU[/green]", first_line)
        else:
            self.table.add_row(
                "✅ tar dialect",
                "[yellow]BSD[/yellow]",
                "no --ignore-failed-read or self-exclusion",
            )

    def check_source(self) -> None:
        """Check the artifact path exists."""
        path = Path(self.source)
        if path.is_dir():
            self.table.add_row("✅ source", "[green]Directory[/green]", str(path))
        elif path.is_file():
            self.table.add_row("✅ source", "[green]File[/green]", str(path))
        else:
            self.failures += 1
            self.table.add_row("❌ source", "[red]Not found[/red]", str(path))

    def execute(self) -> None:
        """Execute doctor command."""
        self.show_header(title="Doctor", subtitle="Checking local deploy prerequisites")

        self.check_tools()
        self.check_tar_dialect()
        self.check_source()

        self.console.print(self.table)
        self.console.print()

        if self.failures:
            self.print_error(f"{self.failures} check(s) failed")
            raise SystemExit(1)
        self.print_success("All checks passed")


@click.command(name="doctor")
@click.option("--from", "source", default=DEFAULT_SOURCE, show_default=True, help="Local artifact path")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def doctor(source, verbose):
    """
    Check local prerequisites for deploying

    Examples:
        sshdeploy doctor
        sshdeploy doctor --from dist
    """
    cmd = DoctorCommand(source, verbose=verbose)
    cmd.run()
