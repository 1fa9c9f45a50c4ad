"""GitHub API integration service"""
import re
from typing import List, Optional, TYPE_CHECKING
from urllib.parse import urlparse

from github import Auth, Github, GithubException

from git_pr_train.constants import EXIT_GITHUB_SETUP
from git_pr_train.exceptions import PreconditionError, RemoteAPIError
from git_pr_train.logging_config import get_logger

if TYPE_CHECKING:
    from github.PullRequest import PullRequest
    from github.Repository import Repository

logger = get_logger(__name__)

_REPO_PATH_RE = re.compile(r"^[^/\s]+/[^/\s]+$")


def parse_github_repo(remote_url: Optional[str]) -> str:
    """Extract ``owner/repo`` from an SSH or HTTPS GitHub remote URL."""
    if not remote_url or "github.com" not in remote_url:
        raise PreconditionError(
            f"Could not parse remote repo URL {remote_url!r}", exit_code=EXIT_GITHUB_SETUP
        )

    if "://" in remote_url:
        # https://github.com/org/repo.git or ssh://git@github.com/org/repo.git
        path = urlparse(remote_url).path.strip("/")
    else:
        # git@github.com:org/repo.git
        path = re.split(r"github\.com[:/]", remote_url, maxsplit=1)[1].strip("/")

    if path.endswith(".git"):
        path = path[:-4]

    if not _REPO_PATH_RE.match(path):
        raise PreconditionError(
            f"Could not parse remote repo URL {remote_url!r}", exit_code=EXIT_GITHUB_SETUP
        )
    return path


class GitHubService:
    def __init__(self, token: str):
        """Initialize the service.

        Note: the token is read from the credential file before this service is built.
        """
        self.github_token = token
        self.github_repo: Optional[str] = None
        self.github: Optional[Github] = None
        self.gh_repo: Optional["Repository"] = None

    @property
    def owner(self) -> str:
        assert self.github_repo is not None
        return self.github_repo.split("/")[0]

    def setup_github_api(self, remote_url: str) -> None:
        """Connect to the repository behind ``remote_url``."""
        self.github_repo = parse_github_repo(remote_url)
        try:
            self.github = Github(auth=Auth.Token(self.github_token))
            self.gh_repo = self.github.get_repo(self.github_repo)
        except GithubException as e:
            raise RemoteAPIError("get_repo", _describe(e))

        logger.debug(f"[GitHub] GitHub API URL: {self.gh_repo.url}")
        logger.debug(f"[GitHub] GitHub integration enabled for: {self.github_repo}")

    def find_pull(self, branch_name: str) -> Optional["PullRequest"]:
        """Open PR whose head is ``branch_name``, if any."""
        assert self.gh_repo is not None
        try:
            pulls = self.gh_repo.get_pulls(state="open", head=f"{self.owner}:{branch_name}")
            for pull in pulls:
                logger.debug(f"[GitHub] Found PR #{pull.number} for {branch_name}")
                return pull
        except GithubException as e:
            raise RemoteAPIError("get_pulls", _describe(e))
        return None

    def create_pull(
        self, branch_name: str, base: str, title: str, body: str, draft: bool = False
    ) -> "PullRequest":
        assert self.gh_repo is not None
        logger.debug(f"[GitHub] Creating PR {branch_name} -> {base}")
        try:
            return self.gh_repo.create_pull(
                base=base, head=branch_name, title=title, body=body, draft=draft
            )
        except GithubException as e:
            raise RemoteAPIError("create_pull", _describe(e))

    def update_pull(self, number: int, title: str, body: str, base: str) -> None:
        assert self.gh_repo is not None
        logger.debug(f"[GitHub] Updating PR #{number} (base {base})")
        try:
            self.gh_repo.get_pull(number).edit(title=title, body=body, base=base)
        except GithubException as e:
            raise RemoteAPIError("update_pull", _describe(e))

    def request_reviewers(self, number: int, reviewers: List[str]) -> None:
        assert self.gh_repo is not None
        logger.debug(f"[GitHub] Requesting review of #{number} from {', '.join(reviewers)}")
        try:
            self.gh_repo.get_pull(number).create_review_request(reviewers=reviewers)
        except GithubException as e:
            raise RemoteAPIError("create_review_request", _describe(e))

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            self.github.close()
            logger.debug("[GitHub] Closed GitHub API connection")


def _describe(error: GithubException) -> str:
    data = error.data
    if isinstance(data, dict):
        message = data.get("message", "")
        details = "; ".join(
            str(item.get("message") or item) if isinstance(item, dict) else str(item)
            for item in data.get("errors", [])
        )
        if details:
            return f"{error.status} {message} ({details})"
        return f"{error.status} {message}"
    return f"{error.status} {data}"
