"""Git operations service"""

import os
import time
from contextlib import contextmanager
from typing import Callable, List, Optional, Tuple, Union, TYPE_CHECKING

import git

from git_pr_train.constants import DEFAULT_REMOTE, DEFAULT_STABLE_BRANCH, MERGE_STEP_DELAY_WAIT_FOR_LOCK
from git_pr_train.exceptions import ConflictFailure, GitOperationError, UnknownFailure
from git_pr_train.logging_config import get_logger

if TYPE_CHECKING:
    from git_pr_train.config import Config

logger = get_logger(__name__)


class GitOperations:
    """Service for Git operations.

    This is the only component that touches the working tree, the index or
    HEAD. Calls are strictly sequential.
    """

    def __init__(
        self,
        repo_path: str,
        config: Union["Config", dict, None] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the service.

        Args:
            repo_path: Path to the git repository (string path, not repo object)
            config: Configuration dictionary or Config object
            sleep: Pause primitive used before retrying a failed combine
        """
        config = config or {}
        self.repo_path = repo_path
        self.remote_name = config.get("remote", DEFAULT_REMOTE)
        self.retry_delay = MERGE_STEP_DELAY_WAIT_FOR_LOCK
        self._sleep = sleep

        logger.debug("Git operations initialized")

    def _get_repo(self):
        """Open the repository.

        GitPython repos are lightweight - they don't clone, just open the existing repo.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(self.repo_path)

    def repo_root(self) -> str:
        return self._get_repo().working_tree_dir

    def current_branch(self) -> Optional[str]:
        """Name of the checked out branch, or None on a detached HEAD."""
        try:
            return self._get_repo().active_branch.name
        except TypeError:
            return None

    def local_branches(self) -> List[str]:
        return [head.name for head in self._get_repo().heads]

    def branch_exists(self, branch_name: str) -> bool:
        return branch_name in self.local_branches()

    def create_branch(self, branch_name: str, start_point: str) -> None:
        logger.info(f"Creating branch {branch_name} from {start_point}")
        try:
            self._get_repo().git.branch(branch_name, start_point)
        except git.exc.GitCommandError as e:
            raise GitOperationError("branch", branch_name, _stderr(e))

    def checkout(self, branch_name: str) -> None:
        logger.debug(f"Checking out {branch_name}")
        try:
            self._get_repo().git.checkout(branch_name)
        except git.exc.GitCommandError as e:
            raise GitOperationError("checkout", branch_name, _stderr(e))

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """Return True if ``ancestor`` is reachable from ``descendant``."""
        try:
            self._get_repo().git.merge_base("--is-ancestor", ancestor, descendant)
            return True
        except git.exc.GitCommandError as e:
            if e.status == 1:
                return False
            raise GitOperationError("merge-base", ancestor, _stderr(e))

    def is_operation_in_progress(self) -> bool:
        """True while a merge or rebase is waiting for conflict resolution."""
        git_dir = self._get_repo().git_dir
        return any(
            os.path.exists(os.path.join(git_dir, marker))
            for marker in ("MERGE_HEAD", "rebase-merge", "rebase-apply")
        )

    def conflicted_paths(self) -> List[str]:
        """Paths with unresolved conflicts in the index."""
        output = self._get_repo().git.diff("--name-only", "--diff-filter=U")
        return [line.strip() for line in output.splitlines() if line.strip()]

    @contextmanager
    def restore_branch(self):
        """Return to the branch checked out on entry when the block exits.

        The branch is restored on every exit path except when a merge or
        rebase is left waiting for conflict resolution; then the conflicted
        branch stays checked out.
        """
        original = self.current_branch()
        try:
            yield original
        finally:
            if original is None:
                logger.debug("Started from a detached HEAD, nothing to restore")
            elif self.is_operation_in_progress():
                logger.warning(
                    f"Leaving {self.current_branch() or 'HEAD'} checked out to resolve conflicts; "
                    f"you were on {original}"
                )
            elif self.current_branch() != original:
                self.checkout(original)

    def _combine_once(self, from_branch: str, to_branch: str, rebase: bool) -> None:
        repo = self._get_repo()
        repo.git.checkout(to_branch)
        if rebase:
            repo.git.rebase(from_branch)
        else:
            repo.git.merge(from_branch)

    def _classify(self, operation: str, to_branch: str, error: git.exc.GitCommandError) -> GitOperationError:
        conflicts = self.conflicted_paths()
        if conflicts:
            return ConflictFailure(operation, to_branch, conflicts)
        return UnknownFailure(operation, to_branch, _stderr(error))

    def combine(self, from_branch: str, to_branch: str, rebase: bool = False) -> None:
        """Incorporate ``from_branch`` into ``to_branch``.

        With ``rebase`` the history of ``to_branch`` is replayed on top of
        ``from_branch``, otherwise ``from_branch`` is merged into it. A
        failure that reports no conflicted paths is retried once after a
        fixed delay; conflicts are raised immediately.
        """
        operation = "rebase" if rebase else "merge"
        logger.debug(f"{operation}: {from_branch} -> {to_branch}")
        try:
            self._combine_once(from_branch, to_branch, rebase)
            return
        except git.exc.GitCommandError as e:
            failure = self._classify(operation, to_branch, e)

        if isinstance(failure, ConflictFailure):
            raise failure

        logger.warning(f"{failure}; retrying in {self.retry_delay}s")
        self._sleep(self.retry_delay)
        try:
            self._combine_once(from_branch, to_branch, rebase)
        except git.exc.GitCommandError as e:
            raise self._classify(operation, to_branch, e) from e

    def push(self, branches: List[str], force: bool = False, remote: Optional[str] = None) -> None:
        """Push all ``branches`` to ``remote`` in one call."""
        if not branches:
            logger.debug("Nothing to push")
            return
        remote = remote or self.remote_name
        args = [remote] + list(branches)
        if force:
            args.insert(0, "--force")
        logger.debug(f"git push {' '.join(args)}")
        try:
            self._get_repo().git.push(*args)
        except git.exc.GitCommandError as e:
            raise GitOperationError("push", message=_stderr(e))

    def merged_branches(self, stable_branch: str = DEFAULT_STABLE_BRANCH) -> List[str]:
        """Local branches already merged into ``stable_branch``."""
        try:
            output = self._get_repo().git.branch("--format=%(refname:short)", "--merged", stable_branch)
        except git.exc.GitCommandError as e:
            raise GitOperationError("branch --merged", stable_branch, _stderr(e))
        return [line.strip() for line in output.splitlines() if line.strip()]

    def unmerged_branches(self, branches: List[str], stable_branch: str = DEFAULT_STABLE_BRANCH) -> List[str]:
        """Requested branches that are not merged into ``stable_branch``, in request order."""
        merged = set(self.merged_branches(stable_branch))
        return [branch for branch in branches if branch not in merged]

    def tip_commit_message(self, branch_name: str) -> Tuple[str, str]:
        """Subject and body of the commit at the tip of ``branch_name``."""
        repo = self._get_repo()
        try:
            subject = repo.git.log("--format=%s", "-n", "1", branch_name)
            body = repo.git.log("--format=%b", "-n", "1", branch_name)
        except git.exc.GitCommandError as e:
            raise GitOperationError("log", branch_name, _stderr(e))
        return subject.strip(), body.strip()

    def remote_url(self, remote: Optional[str] = None) -> Optional[str]:
        remote = remote or self.remote_name
        try:
            url = self._get_repo().git.config("--get", f"remote.{remote}.url")
        except git.exc.GitCommandError:
            # git config exits 1 when the key is unset
            return None
        return url.strip() or None


def _stderr(error: git.exc.GitCommandError) -> str:
    text = (error.stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip()
    return text.strip("'").strip() or str(error)
