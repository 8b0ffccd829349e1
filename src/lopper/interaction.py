"""Terminal interaction: spinners, prompts and reports."""

import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from rich.console import Console
from rich.prompt import Confirm

from lopper.display import print_report
from lopper.models import Branch, DeletionResult


def build_choices(branches: Sequence[Branch]) -> list[Choice]:
    """Return one unchecked choice per branch, labelled with its last commit."""
    return [
        Choice(value=branch.name, name=f"{branch.name}  {branch.last_commit_summary}".rstrip())
        for branch in branches
    ]


class Interaction(ABC):
    """User-facing I/O used by the commands."""

    @abstractmethod
    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show progress while the body runs."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask a yes/no question. Defaults to no."""

    @abstractmethod
    def select_many(self, branches: Sequence[Branch]) -> list[str]:
        """Let the user pick branches; returns the chosen names in listing order."""

    @abstractmethod
    def report(self, results: Sequence[DeletionResult]) -> None:
        """Report the outcome of a deletion run."""


class ConsoleInteraction(Interaction):
    """Interaction backed by a rich console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        with self.console.status(message):
            yield

    def confirm(self, message: str) -> bool:
        try:
            return Confirm.ask(message, default=False, console=self.console)
        except EOFError:
            return False

    def select_many(self, branches: Sequence[Branch]) -> list[str]:
        if not branches:
            return []
        if not sys.stdin.isatty():
            self.console.print(
                "[yellow]Interactive selection requires a terminal. Pass branch names to delete them directly.[/yellow]"
            )
            return []
        try:
            selected = inquirer.checkbox(
                message="Select branches to delete",
                choices=build_choices(branches),
                instruction="(space to toggle, enter to confirm)",
            ).execute()
        except KeyboardInterrupt:
            return []
        chosen = set(selected or [])
        return [branch.name for branch in branches if branch.name in chosen]

    def report(self, results: Sequence[DeletionResult]) -> None:
        print_report(self.console, results)
