"""Pytest fixtures for git-pr-train tests"""
import tempfile
from pathlib import Path
from types import SimpleNamespace

import git
import pytest

from git_pr_train.exceptions import RemoteAPIError


TRAIN_YAML = """\
trains:
  feature:
    - feat-1
    - feat-2
    - feat-3:
        combined: true
  other:
    - other-1
    - other-2
"""


def commit_file(repo, filename, content, message):
    """Write ``filename`` and commit it on the current branch."""
    path = Path(repo.working_dir) / filename
    path.write_text(content)
    repo.index.add([filename])
    return repo.index.commit(message)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'stable_branch': 'master',
        'remote': 'origin',
        'rebase': False,
        'force': False,
        'push_merged': False,
        'verbose': False,
        'debug': False,
    }


@pytest.fixture
def git_repo(temp_dir, monkeypatch):
    """Create a real Git repository with a master branch."""
    # Never open an editor for merge commit messages
    monkeypatch.setenv("GIT_MERGE_AUTOEDIT", "no")
    monkeypatch.setenv("GIT_EDITOR", "true")

    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)

    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("commit", "gpgsign", "false").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")
    repo.git.branch('-M', 'master')

    # Fake GitHub remote, used for URL parsing only
    repo.create_remote('origin', 'git@github.com:test/test-repo.git')

    yield repo

    repo.close()


@pytest.fixture
def train_repo(git_repo):
    """Repository with feat-1 <- feat-2 <- feat-3 stacked on master, feat-1 checked out."""
    repo = git_repo

    repo.git.checkout('-b', 'feat-1')
    commit_file(repo, "one.txt", "one\n", "Add feature one\n\nBody of one")
    repo.git.checkout('-b', 'feat-2')
    commit_file(repo, "two.txt", "two\n", "Add feature two\n\nBody of two")
    repo.git.checkout('-b', 'feat-3')
    commit_file(repo, "three.txt", "three\n", "Add feature three")
    repo.git.checkout('feat-1')

    yield repo


@pytest.fixture
def train_config_file(train_repo):
    path = Path(train_repo.working_dir) / ".pr-train.yml"
    path.write_text(TRAIN_YAML)
    return path


@pytest.fixture
def bare_remote(git_repo, temp_dir):
    """Bare repository registered as remote 'local' of git_repo."""
    remote_path = temp_dir / "remote.git"
    remote = git.Repo.init(remote_path, bare=True)
    git_repo.create_remote('local', str(remote_path))
    yield remote
    remote.close()


class FakeGitHubService:
    """In-memory stand-in for GitHubService that hands out sequential PR numbers."""

    def __init__(self, start=101):
        self.pulls = {}
        self.next_number = start
        self.created = []
        self.updated = []
        self.review_requests = []
        self.fail_create_for = set()

    def add_existing(self, number, head, title, body, base="master"):
        self.pulls[number] = SimpleNamespace(number=number, head=head, title=title, body=body, base=base, draft=False)

    def setup_github_api(self, remote_url):
        self.remote_url = remote_url

    def close(self):
        pass

    def find_pull(self, branch_name):
        for pull in self.pulls.values():
            if pull.head == branch_name:
                return pull
        return None

    def create_pull(self, branch_name, base, title, body, draft=False):
        if branch_name in self.fail_create_for:
            raise RemoteAPIError("create_pull", "422 Validation Failed")
        number = self.next_number
        self.next_number += 1
        pull = SimpleNamespace(number=number, head=branch_name, title=title, body=body, base=base, draft=draft)
        self.pulls[number] = pull
        self.created.append(number)
        return pull

    def update_pull(self, number, title, body, base):
        pull = self.pulls[number]
        pull.title = title
        pull.body = body
        pull.base = base
        self.updated.append(number)

    def request_reviewers(self, number, reviewers):
        self.review_requests.append((number, list(reviewers)))


@pytest.fixture
def fake_github():
    return FakeGitHubService()
