"""Console rendering for train listings and PR plans"""
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from git_pr_train.models.train import BranchRef, Train

console = Console()


class DisplayService:
    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def format_branch_line(self, ref: BranchRef, current_branch: Optional[str]) -> str:
        name = escape(ref.name)
        if ref.name == current_branch:
            name = f"[bold green]{name}[/bold green]"
        suffix = " (combined)" if ref.combined else ""
        return f"\\[{ref.index}] {name}{suffix}"

    def display_train(self, train: Train, current_branch: Optional[str]) -> None:
        """Print every branch of the train with its index."""
        self.console.print("I've found these partial branches:")
        for ref in train:
            self.console.print(f" -> {self.format_branch_line(ref, current_branch)}")
        self.console.print()

    def display_pr_plan(self, plan: List[Tuple[str, str]]) -> None:
        """Print the branches PRs will be created or updated for, with their titles."""
        self.console.print()
        self.console.print("This will create (or update) PRs for the following branches:")
        for branch, title in plan:
            self.console.print(f"  -> [green]{escape(branch)}[/green] ([italic]{escape(title)}[/italic])")
        self.console.print()

    def display_skipped_merged(self, branches: List[str]) -> None:
        if branches:
            self.console.print(f"Not pushing already merged branches: {', '.join(branches)}")

    def confirm(self, question: str) -> bool:
        response = self.console.input(f"[bold]{question}[/bold] \\[y/n] ")
        return response.strip().lower() in ("y", "yes")

    def ask(self, question: str) -> str:
        return self.console.input(f"[bold]{question}[/bold] ").strip()
