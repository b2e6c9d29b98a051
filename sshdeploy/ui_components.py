"""
sshdeploy - UI Components
Standardized headers and summary tables
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sshdeploy.models.results import DeploymentResult, ResultStatus

STATUS_STYLES = {
    ResultStatus.SUCCESS: "[green]✓ done[/green]",
    ResultStatus.FAILURE: "[red]✗ failed[/red]",
    ResultStatus.SKIPPED: "[dim]- skipped[/dim]",
}


def show_header(
    title: str,
    subtitle: Optional[str] = None,
    details: Optional[dict] = None,
    console: Optional[Console] = None,
):
    """
    Display a standardized sshdeploy command header.

    Args:
        title: Main title (e.g., "Deploy", "Plan")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy",
            details={"Host": "example.com", "From": "./dist"}
        )
    """
    if console is None:
        console = Console()

    console.print(
        f" [bold color(214)]sshdeploy[/bold color(214)] [dim]›[/dim] [bold white]{escape(title)}[/bold white]"
    )

    if subtitle:
        console.print(
            f" [bold color(214)]sshdeploy[/bold color(214)] [dim]›[/dim] [dim]{escape(subtitle)}[/dim]"
        )

    if details:
        for key, value in details.items():
            console.print(
                f" [bold color(214)]sshdeploy[/bold color(214)] [dim]›[/dim] {key}: [cyan]{escape(str(value))}[/cyan]"
            )

    console.print()


def stage_summary_table(result: DeploymentResult) -> Table:
    """Build the per-stage summary table for a finished run."""
    table = Table(title="Deployment Summary", title_justify="left", padding=(0, 1))
    table.add_column("Stage", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="dim")

    for stage in result.stages:
        table.add_row(stage.name, STATUS_STYLES[stage.status], escape(stage.message))

    return table


def plan_table(planned: List) -> Table:
    """Build the table for `sshdeploy plan`."""
    table = Table(title="Deployment Plan", title_justify="left", padding=(0, 1))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Stage", style="cyan", no_wrap=True)
    table.add_column("Actions")

    for index, stage in enumerate(planned, start=1):
        if stage.skipped:
            actions = "[dim]skipped[/dim]"
        else:
            actions = "\n".join(escape(a) for a in stage.actions)
        table.add_row(str(index), stage.name, actions)

    return table
