"""Git-related services for git-pr-train."""

from .operations import GitOperations

__all__ = [
    "GitOperations",
]
