"""Rich rendering of branch listings and deletion reports."""

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lopper.classify import DisplayClass
from lopper.deletion import DeletionSummary
from lopper.git import VcsGateway
from lopper.models import Branch, DeletionOutcome, DeletionResult

CLASS_STYLES = {
    DisplayClass.CURRENT: "green",
    DisplayClass.STALE: "red",
    DisplayClass.NORMAL: "bright_black",
}


def create_branch_table(title: str, verbose: bool = False) -> Table:
    """Create a table with standard branch columns."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    if verbose:
        table.add_column("Last Commit", style="bright_black")
        table.add_column("Date", style="yellow", no_wrap=True)
    return table


def print_clean(console: Console, message: str) -> None:
    """Print a green panel saying there is nothing to do."""
    console.print(Panel(f"[green]{message}[/green]", style="green", padding=(0, 2), expand=False))


def print_all(console: Console, rows: Sequence[tuple[Branch, DisplayClass]]) -> None:
    """Print every branch, marking the current one and colouring stale ones."""
    table = Table(title="All Branches", show_header=True, header_style="bold", title_style="bold blue")
    table.add_column("", width=1, no_wrap=True)
    table.add_column("Branch", no_wrap=True)
    table.add_column("Upstream", style="magenta", no_wrap=True)
    for branch, display in rows:
        marker = "[green]*[/green]" if display == DisplayClass.CURRENT else ""
        style = CLASS_STYLES[display]
        upstream = escape(branch.upstream)
        if display == DisplayClass.STALE:
            upstream = f"[red]{upstream}: gone[/red]"
        table.add_row(marker, f"[{style}]{escape(branch.name)}[/{style}]", upstream)
    console.print(table)


def print_branches(
    console: Console,
    title: str,
    branches: Sequence[Branch],
    gateway: VcsGateway,
    verbose: bool = False,
) -> None:
    """Print a candidate list, with last-commit detail when verbose."""
    table = create_branch_table(title, verbose)
    for branch in branches:
        if verbose:
            table.add_row(escape(branch.name), escape(branch.last_commit_summary), gateway.last_commit_date(branch.name))
        else:
            table.add_row(escape(branch.name))
    console.print(table)


def print_result(console: Console, result: DeletionResult) -> None:
    """Print a single progress line for a deletion result."""
    if result.outcome == DeletionOutcome.DELETED:
        console.print(f"[red]Deleted branch:[/red] {escape(result.name)} ✨")
    elif result.outcome == DeletionOutcome.SKIPPED:
        console.print(f"[yellow]Skipping protected branch:[/yellow] {escape(result.name)}")
    else:
        console.print(f"[red]Failed to delete {escape(result.name)}:[/red] {escape(result.reason)}")


def print_report(console: Console, results: Sequence[DeletionResult]) -> None:
    """Print the final deletion report table and counts."""
    summary = DeletionSummary.of(results)
    if not results:
        console.print("[yellow]No branches were deleted[/yellow] 🤔")
        return

    table = Table(
        title="Deletion Results",
        show_header=True,
        header_style="bold",
        title_style="bold green" if not summary.failed else "bold yellow",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Outcome", justify="center", no_wrap=True)
    table.add_column("Detail")
    for result in results:
        if result.outcome == DeletionOutcome.DELETED:
            outcome = "[green]deleted[/green]"
        elif result.outcome == DeletionOutcome.SKIPPED:
            outcome = "[yellow]skipped[/yellow]"
        else:
            outcome = "[red]failed[/red]"
        table.add_row(escape(result.name), outcome, escape(result.reason))

    console.print()
    console.print(table)
    console.print(
        f"Deleted {summary.deleted}, skipped {summary.skipped}, failed {summary.failed} of {summary.total} branch(es)"
    )
