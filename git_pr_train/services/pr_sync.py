"""Create and update the GitHub PRs of a train"""
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from rich.console import Console

from git_pr_train.constants import EXIT_MISSING_TITLE, SYMBOL_FAIL, SYMBOL_OK
from git_pr_train.exceptions import PreconditionError, RemoteAPIError
from git_pr_train.logging_config import get_logger
from git_pr_train.models.pull_request import PRRecord, PRStatus
from git_pr_train.models.train import BranchRef, Train
from git_pr_train.services.git.operations import GitOperations
from git_pr_train.services.github_service import GitHubService
from git_pr_train.services.navigation import build_entries, render_navigation, upsert_navigation

console = Console()
logger = get_logger(__name__)


class PRSynchronizer:
    """Ensures one PR per train branch and keeps their navigation blocks current.

    Runs in two passes. The first finds or creates every PR and records it
    in a branch -> PR directory. The second renders the navigation block for
    each PR from the finished directory, so every PR can cite PRs created
    after it in the first pass.
    """

    def __init__(
        self,
        git_ops: GitOperations,
        github_service: GitHubService,
        stable_branch: str,
        reviewers: Optional[List[str]] = None,
        draft: bool = False,
        combined_title: Optional[str] = None,
    ):
        self.git_ops = git_ops
        self.github_service = github_service
        self.stable_branch = stable_branch
        self.reviewers = list(reviewers or [])
        self.draft = draft
        self.combined_title = combined_title

    def desired_message(self, ref: BranchRef) -> Tuple[str, str]:
        """Title and body a new PR for ``ref`` would get."""
        if ref.combined:
            if not self.combined_title:
                raise PreconditionError(
                    "Cannot continue without a title for the combined branch PR",
                    exit_code=EXIT_MISSING_TITLE,
                )
            return self.combined_title, ""
        return self.git_ops.tip_commit_message(ref.name)

    def sync(self, train: Train, branches: Optional[List[BranchRef]] = None) -> Mapping[str, PRRecord]:
        """Synchronize PRs for ``branches`` (defaults to the whole train).

        Branches outside ``branches`` are only looked up, never created or
        edited, so the navigation blocks written here still cite them.
        Returns the read-only branch -> PR directory in train order.
        """
        branches = train.select() if branches is None else branches
        selected = {ref.name for ref in branches}
        directory: Dict[str, PRRecord] = {}
        for ref in train:
            if ref.name in selected:
                directory[ref.name] = self._ensure_pull(train, ref)
                continue
            record = self._lookup_pull(train, ref)
            if record is not None:
                directory[ref.name] = record

        records = MappingProxyType(directory)
        combined = train.combined_branch.name if train.combined_branch else None
        for ref in branches:
            self._update_pull(train, records[ref.name], records, combined)

        created = sum(1 for record in records.values() if record.is_new)
        logger.info(f"Synchronized {len(branches)} PRs ({created} created)")
        return records

    def _lookup_pull(self, train: Train, ref: BranchRef) -> Optional[PRRecord]:
        pull = self.github_service.find_pull(ref.name)
        if pull is None:
            logger.debug(f"No PR for {ref.name} outside the selected range")
            return None
        return PRRecord(
            branch=ref.name,
            number=pull.number,
            title=pull.title,
            body=pull.body or "",
            base=train.base_of(ref.name, self.stable_branch),
            status=PRStatus.EXISTING,
        )

    def _ensure_pull(self, train: Train, ref: BranchRef) -> PRRecord:
        base = train.base_of(ref.name, self.stable_branch)
        title, body = self.desired_message(ref)

        console.print(f"Checking if PR for branch {ref.name} already exists... ", end="")
        pull = self.github_service.find_pull(ref.name)
        if pull is not None:
            console.print("yep")
            # The remote title and body win, so manual edits survive
            return PRRecord(
                branch=ref.name,
                number=pull.number,
                title=pull.title,
                body=pull.body or "",
                base=base,
                status=PRStatus.EXISTING,
                reviewers=self.reviewers,
            )

        console.print("nope")
        console.print(f'Creating PR for branch "{ref.name}"... ', end="")
        try:
            pull = self.github_service.create_pull(ref.name, base, title, body, draft=self.draft)
        except RemoteAPIError:
            console.print(SYMBOL_FAIL)
            raise
        console.print(SYMBOL_OK)
        logger.info(f"Created PR #{pull.number} for {ref.name} (base {base})")
        return PRRecord(
            branch=ref.name,
            number=pull.number,
            title=pull.title or title,
            body=pull.body if pull.body is not None else body,
            base=base,
            status=PRStatus.NEW,
            reviewers=self.reviewers,
        )

    def _update_pull(
        self,
        train: Train,
        record: PRRecord,
        records: Mapping[str, PRRecord],
        combined: Optional[str],
    ) -> None:
        base = train.base_of(record.branch, self.stable_branch)
        navigation = render_navigation(build_entries(records, record.branch, combined))
        body = upsert_navigation(navigation, record.body)

        console.print(f"Updating PR for branch {record.branch}... ", end="")
        try:
            self.github_service.update_pull(record.number, title=record.title, body=body, base=base)
            if record.reviewers:
                self.github_service.request_reviewers(record.number, record.reviewers)
        except RemoteAPIError:
            console.print(SYMBOL_FAIL)
            raise
        console.print(SYMBOL_OK)
