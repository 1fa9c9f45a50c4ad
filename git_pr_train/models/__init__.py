"""Data models for git-pr-train."""

from .train import BranchEntry, BranchWithOptions, SimpleBranch, BranchRef, Train, parse_range
from .pull_request import PRStatus, PRRecord, NavigationEntry

__all__ = [
    "BranchEntry",
    "BranchWithOptions",
    "SimpleBranch",
    "BranchRef",
    "Train",
    "parse_range",
    "PRStatus",
    "PRRecord",
    "NavigationEntry",
]
