"""Core functionality for git-pr-train"""

import time
from typing import Callable, Mapping, Optional, Union

import git
from rich.console import Console

from git_pr_train.config import Config, TrainConfig, init_config, load_train_config, read_github_token
from git_pr_train.constants import DEFAULT_STABLE_BRANCH, EXIT_GITHUB_SETUP, EXIT_MISSING_TITLE, SYMBOL_OK
from git_pr_train.exceptions import PreconditionError
from git_pr_train.logging_config import get_logger
from git_pr_train.models.pull_request import PRRecord
from git_pr_train.models.train import BranchRef, Train
from git_pr_train.services.display_service import DisplayService
from git_pr_train.services.git import GitOperations
from git_pr_train.services.github_service import GitHubService, parse_github_repo
from git_pr_train.services.pr_sync import PRSynchronizer
from git_pr_train.services.reflow import ReflowEngine, ReflowResult

console = Console()
logger = get_logger(__name__)


class PRTrain:
    """Runs train commands for the repository at ``repo_path``."""

    def __init__(
        self,
        repo_path: str,
        config: Union[Config, dict],
        display: Optional[DisplayService] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize PRTrain.

        Args:
            repo_path: Path inside a git repository
            config: Configuration dict or Config object
            display: Console renderer, replaced in tests
            sleep: Pause primitive shared by reflow steps and combine retries
        """
        if isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config

        try:
            repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise PreconditionError("Not a git repo")
        if repo.working_tree_dir is None:
            raise PreconditionError("Not a git repo")
        self.repo_root = repo.working_tree_dir

        self.git_service = GitOperations(self.repo_root, self.config, sleep=sleep)
        self.display = display or DisplayService()
        self._sleep = sleep

        self.train_config: Optional[TrainConfig] = None
        self.train: Optional[Train] = None
        self.current_branch: Optional[str] = None

    def init_config(self) -> None:
        path = init_config(self.repo_root)
        console.print(f'Created a "{path.name}" file. Please make sure it\'s gitignored.')

    def load(self) -> Train:
        """Find the train containing the checked out branch."""
        self.train_config = load_train_config(self.repo_root)
        self.current_branch = self.git_service.current_branch()
        train = self.train_config.find_train(self.current_branch) if self.current_branch else None
        if train is None:
            raise PreconditionError(f"Current branch {self.current_branch} is not a train branch.")
        self.train = train
        logger.debug(f"Using {train!r}")
        self._ensure_combined_branch()
        return train

    def _ensure_combined_branch(self) -> None:
        combined = self.train.combined_branch
        if combined is None or self.git_service.branch_exists(combined.name):
            return
        start = self.train.branches[-2].name if len(self.train) > 1 else self.stable_branch
        self.git_service.create_branch(combined.name, start)

    @property
    def stable_branch(self) -> str:
        if self.config.stable_branch:
            return self.config.stable_branch
        if self.train_config and self.train_config.main_branch_name:
            return self.train_config.main_branch_name
        return DEFAULT_STABLE_BRANCH

    @property
    def draft(self) -> bool:
        return self.config.draft or bool(self.train_config and self.train_config.draft_by_default)

    def list_branches(self) -> None:
        self.display.display_train(self.train, self.current_branch)

    def switch_to(self, index: Union[int, str]) -> str:
        """Check out the branch at ``index`` (or ``combined``)."""
        target = self.train.branch_at(index)
        return self._switch(target)

    def step(self, offset: int) -> str:
        """Check out the next (``offset=1``) or previous (``offset=-1``) branch."""
        if offset > 0:
            target = self.train.next_of(self.current_branch)
        else:
            target = self.train.previous_of(self.current_branch)
        return self._switch(target)

    def _switch(self, target: BranchRef) -> str:
        self.git_service.checkout(target.name)
        self.current_branch = target.name
        console.print(f"Switched to branch {target.name}")
        return target.name

    def push(self, selection: Optional[slice] = None) -> None:
        """Push the selected branches, skipping ones merged into the stable branch."""
        branches = [ref.name for ref in self.train.select(selection)]
        to_push = branches
        if not self.config.push_merged:
            to_push = self.git_service.unmerged_branches(branches, self.stable_branch)
            self.display.display_skipped_merged([b for b in branches if b not in to_push])

        console.print(f"Pushing changes to remote {self.config.remote}...")
        self.git_service.push(to_push, force=self.config.force, remote=self.config.remote)
        console.print(f"All changes pushed {SYMBOL_OK}")

    def reflow(self) -> ReflowResult:
        engine = ReflowEngine(self.git_service, rebase=self.config.rebase, sleep=self._sleep)
        return engine.run(self.train)

    def create_prs(self, selection: Optional[slice] = None) -> Optional[Mapping[str, PRRecord]]:
        """Push the selected branches and create or update their PRs.

        Returns the branch -> PR directory, or None when the user declines.
        """
        token = read_github_token()
        remote_url = self.git_service.remote_url(self.config.remote)
        if not remote_url:
            raise PreconditionError(
                f"URL for remote {self.config.remote} not found in your git config",
                exit_code=EXIT_GITHUB_SETUP,
            )
        parse_github_repo(remote_url)

        branches = self.train.select(selection)
        combined_title = self.config.combined_title
        if any(ref.combined for ref in branches) and not combined_title:
            console.print()
            console.print('Now I will need to know what to call your "combined" branch PR in GitHub.')
            combined_title = self.display.ask("Combined branch PR title:")
            if not combined_title:
                raise PreconditionError(
                    "Cannot continue. (I need to know what the title of your combined branch PR should be.)",
                    exit_code=EXIT_MISSING_TITLE,
                )

        github_service = GitHubService(token)
        synchronizer = PRSynchronizer(
            self.git_service,
            github_service,
            self.stable_branch,
            reviewers=self.config.reviewers,
            draft=self.draft,
            combined_title=combined_title,
        )

        self.display.display_pr_plan([(ref.name, synchronizer.desired_message(ref)[0]) for ref in branches])
        if not self.config.assume_yes and not self.display.confirm("Shall we do this?"):
            console.print("No worries. Bye now. 👋")
            return None

        self.push(selection)
        github_service.setup_github_api(remote_url)
        try:
            return synchronizer.sync(self.train, branches)
        finally:
            github_service.close()
