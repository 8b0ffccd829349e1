"""Command line interface for lopper."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Callable, NoReturn, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from lopper import __version__
from lopper.classify import select_all, select_deletable, select_merged, select_remote_deletable, select_stale
from lopper.deletion import execute_deletion, execute_remote_deletion
from lopper.display import print_all, print_branches, print_clean, print_result
from lopper.git import FetchError, GitRepo, VcsGateway
from lopper.interaction import ConsoleInteraction, Interaction
from lopper.models import Branch, BranchCollection, is_protected

app = typer.Typer(help="Inventory and clean up local git branches")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

PathOption = Annotated[Path, typer.Option(help="Path to git repository")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show last commit details")]
AutoDeleteOption = Annotated[bool, typer.Option("--auto-delete", help="Delete without asking for confirmation")]
DryRunOption = Annotated[bool, typer.Option("--dry-run", help="List branches without deleting")]


@dataclass
class AppState:
    """Dependencies shared by every command."""

    open_gateway: Callable[[Path], VcsGateway] = GitRepo
    interaction: Interaction = field(default_factory=lambda: ConsoleInteraction(console))


def configure_logging(debug: bool) -> None:
    """Route log records through rich on stderr; --debug lowers the level to DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
    )


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"lopper {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Log git calls and per-branch outcomes"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Inventory, classify and delete git branches."""
    configure_logging(debug)
    if ctx.obj is None:
        ctx.obj = AppState()


def get_gateway(state: AppState, path: Path) -> VcsGateway:
    """Get gateway instance."""
    try:
        return state.open_gateway(path)
    except FetchError as err:
        fail(err)


def fail(err: FetchError) -> NoReturn:
    """Report a fatal listing error on stderr and exit with status 1."""
    logger.debug("Aborting command", exc_info=err)
    err_console.print(f"[red]Error:[/red] {escape(str(err))}")
    raise typer.Exit(code=1) from err


def fetch(state: AppState, message: str, fetcher: Callable[[], BranchCollection]) -> BranchCollection:
    """Run a listing call behind a spinner, exiting on failure."""
    try:
        with state.interaction.status(message):
            return fetcher()
    except FetchError as err:
        fail(err)


def run_deletion(state: AppState, gateway: VcsGateway, names: Sequence[str], force: bool = False) -> None:
    """Delete local branches, printing each outcome and then the report."""
    with state.interaction.status("Deleting branches..."):
        results = execute_deletion(gateway, names, force, on_result=lambda result: print_result(console, result))
    state.interaction.report(results)


def run_remote_deletion(state: AppState, gateway: VcsGateway, names: Sequence[str]) -> None:
    """Delete remote-qualified branches on their remotes and report the outcome."""
    with state.interaction.status("Deleting remote branches..."):
        results = execute_remote_deletion(gateway, names, on_result=lambda result: print_result(console, result))
    state.interaction.report(results)


def confirm_and_delete(
    state: AppState,
    branches: Sequence[Branch],
    run: Callable[[Sequence[str]], None],
    *,
    auto_delete: bool,
    dry_run: bool,
) -> None:
    """Shared tail of the clean-* commands."""
    names = [branch.name for branch in branches]
    if dry_run:
        console.print("[yellow]Dry run mode: no branches will be deleted.[/yellow]")
        return
    if not auto_delete and not state.interaction.confirm(f"Are you sure you want to delete {len(names)} branch(es)?"):
        console.print("[yellow]Operation cancelled[/yellow] 🛑")
        return
    run(names)


@app.command("list-all")
def list_all(ctx: typer.Context, path: PathOption = Path(".")) -> None:
    """List all branches, marking the current one and colouring stale ones."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)
    collection = fetch(state, "Fetching all branches...", gateway.fetch_all_branches)
    if not collection:
        print_clean(console, "No branches found!")
        return
    print_all(console, select_all(collection))


@app.command("clean-merged")
def clean_merged(
    ctx: typer.Context,
    path: PathOption = Path("."),
    verbose: VerboseOption = False,
    auto_delete: AutoDeleteOption = False,
    dry_run: DryRunOption = False,
) -> None:
    """List merged branches and delete them after confirmation."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)
    collection = fetch(state, "Fetching merged branches...", gateway.fetch_merged_branches)
    branches = select_merged(collection)
    if not branches:
        print_clean(console, "No merged branches found to clean up!")
        return

    print_branches(console, "Merged branches that can be deleted", branches, gateway, verbose)
    confirm_and_delete(
        state,
        branches,
        lambda names: run_deletion(state, gateway, names),
        auto_delete=auto_delete,
        dry_run=dry_run,
    )


@app.command("list-stale")
def list_stale(ctx: typer.Context, path: PathOption = Path("."), verbose: VerboseOption = False) -> None:
    """List branches whose upstream is gone."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)
    collection = fetch(state, "Fetching stale branches...", gateway.fetch_all_branches)
    branches = select_stale(collection)
    if not branches:
        print_clean(console, "No stale branches found!")
        return
    print_branches(console, "Stale branches", branches, gateway, verbose)


@app.command("clean-stale")
def clean_stale(
    ctx: typer.Context,
    path: PathOption = Path("."),
    verbose: VerboseOption = False,
    auto_delete: AutoDeleteOption = False,
    dry_run: DryRunOption = False,
    force: bool = typer.Option(False, "--force", "-f", help="Delete branches with unmerged commits"),
) -> None:
    """Delete branches whose upstream is gone."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)
    collection = fetch(state, "Fetching stale branches...", gateway.fetch_all_branches)
    branches = [branch for branch in select_stale(collection) if not is_protected(branch.name)]
    if not branches:
        print_clean(console, "No stale branches to delete!")
        return

    print_branches(console, "Stale branches", branches, gateway, verbose)
    confirm_and_delete(
        state,
        branches,
        lambda names: run_deletion(state, gateway, names, force),
        auto_delete=auto_delete,
        dry_run=dry_run,
    )


@app.command()
def delete(
    ctx: typer.Context,
    branches: Annotated[Optional[list[str]], typer.Argument(help="Branches to delete")] = None,
    path: PathOption = Path("."),
    force: bool = typer.Option(False, "--force", "-f", help="Delete branches with unmerged commits"),
) -> None:
    """Delete the named branches, or pick them interactively."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)

    if branches:
        run_deletion(state, gateway, branches, force)
        return

    collection = fetch(state, "Fetching branches...", gateway.fetch_all_branches)
    candidates = select_deletable(collection)
    if not candidates:
        print_clean(console, "No branches available to delete!")
        return

    selected = state.interaction.select_many(candidates)
    if not selected:
        console.print("[yellow]No branches selected for deletion.[/yellow]")
        return
    if not state.interaction.confirm(f"Are you sure you want to delete {len(selected)} branch(es)?"):
        console.print("[yellow]Operation cancelled[/yellow] 🛑")
        return
    run_deletion(state, gateway, selected, force)


@app.command("clean-remote")
def clean_remote(
    ctx: typer.Context,
    path: PathOption = Path("."),
    auto_delete: AutoDeleteOption = False,
    dry_run: DryRunOption = False,
) -> None:
    """List remote branches and delete them on their remote after confirmation."""
    state: AppState = ctx.obj
    gateway = get_gateway(state, path)
    collection = fetch(state, "Fetching remote branches...", gateway.fetch_remote_branches)
    branches = select_remote_deletable(collection)
    if not branches:
        print_clean(console, "No stale remote branches found!")
        return

    print_branches(console, "Stale remote branches", branches, gateway)
    confirm_and_delete(
        state,
        branches,
        lambda names: run_remote_deletion(state, gateway, names),
        auto_delete=auto_delete,
        dry_run=dry_run,
    )


if __name__ == "__main__":
    app()
