"""Reflow: propagate upstream changes down the train"""
import time
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from rich.console import Console

from git_pr_train.constants import MERGE_STEP_DELAY, SYMBOL_OK
from git_pr_train.logging_config import get_logger
from git_pr_train.models.train import Train
from git_pr_train.services.git.operations import GitOperations

console = Console()
logger = get_logger(__name__)


@dataclass
class ReflowResult:
    """Pairs handled by one reflow run."""
    combined: List[Tuple[str, str]] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)


class ReflowEngine:
    """Walks a train pairwise and merges or rebases each branch onto its predecessor."""

    def __init__(
        self,
        git_ops: GitOperations,
        rebase: bool = False,
        step_delay: float = MERGE_STEP_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.git_ops = git_ops
        self.rebase = rebase
        self.step_delay = step_delay
        self._sleep = sleep

    def run(self, train: Train) -> ReflowResult:
        """Reflow ``train`` and return to the starting branch.

        Pairs where the upstream branch is already an ancestor of the
        downstream one are skipped, so a second run without new commits does
        nothing. A conflict aborts the remaining pairs and leaves the
        conflicted branch checked out.
        """
        result = ReflowResult()
        with self.git_ops.restore_branch():
            for upstream, downstream in train.pairs():
                pair = (upstream.name, downstream.name)
                if self.git_ops.is_ancestor(upstream.name, downstream.name):
                    console.print(
                        f"Branch {upstream.name} is an ancestor of {downstream.name} => nothing to do"
                    )
                    result.skipped.append(pair)
                    continue

                if self.rebase:
                    console.print(f"rebasing {downstream.name} onto branch {upstream.name}... ", end="")
                else:
                    console.print(f"merging {upstream.name} into branch {downstream.name}... ", end="")
                try:
                    self.git_ops.combine(upstream.name, downstream.name, rebase=self.rebase)
                except Exception:
                    console.print()
                    raise
                console.print(SYMBOL_OK)
                result.combined.append(pair)
                self._sleep(self.step_delay)

        logger.info(f"Reflow done: {len(result.combined)} combined, {len(result.skipped)} skipped")
        return result
