"""Command orchestration for git-pr-train."""

from .pr_train import PRTrain

__all__ = ["PRTrain"]
