"""Custom exceptions for git-pr-train"""

from typing import List, Optional

from git_pr_train.constants import (
    EXIT_BRANCH_NOT_FOUND,
    EXIT_GENERAL,
)


class PrTrainError(Exception):
    """Base exception for all git-pr-train errors."""

    exit_code = EXIT_GENERAL


class ConfigError(PrTrainError):
    """Missing or malformed .pr-train.yml."""


class PreconditionError(PrTrainError):
    """A fatal precondition of the requested command is not met."""

    def __init__(self, message: str, exit_code: int = EXIT_GENERAL):
        self.exit_code = exit_code
        super().__init__(message)


class BranchNotFoundError(PreconditionError):
    """Exception raised when a train index does not resolve to a branch."""

    def __init__(self, index):
        self.index = index
        super().__init__(
            f"Could not find branch with index {index}", exit_code=EXIT_BRANCH_NOT_FOUND
        )


class GitOperationError(PrTrainError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConflictFailure(GitOperationError):
    """Merge or rebase stopped on conflicts that need manual resolution."""

    def __init__(self, operation: str, branch: str, conflicts: List[str]):
        self.conflicts = conflicts
        super().__init__(
            operation,
            branch,
            f"conflicts in {', '.join(conflicts)}. Resolve them and run the command again",
        )


class UnknownFailure(GitOperationError):
    """Git failed without reporting conflicts, most often a held index.lock."""


class RemoteAPIError(PrTrainError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
