"""Configuration handling for git-pr-train"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from git_pr_train.constants import (
    CONFIG_FILENAME,
    CONFIG_TEMPLATE,
    CREDENTIALS_PATH,
    DEFAULT_REMOTE,
    EXIT_GITHUB_SETUP,
)
from git_pr_train.exceptions import ConfigError, PreconditionError
from git_pr_train.logging_config import get_logger
from git_pr_train.models.train import BranchEntry, BranchWithOptions, SimpleBranch, Train

logger = get_logger(__name__)


@dataclass
class Config:
    """Run options for git-pr-train with validation."""

    # None defers to prs.main-branch-name in .pr-train.yml, then "master"
    stable_branch: Optional[str] = None
    remote: str = DEFAULT_REMOTE

    # Reflow / push
    rebase: bool = False
    force: bool = False
    push_merged: bool = False

    # PR creation
    draft: bool = False
    reviewers: List[str] = field(default_factory=list)
    combined_title: Optional[str] = None
    assume_yes: bool = False

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_stable_branch()
        self._validate_remote()
        self._validate_reviewers()

    def _validate_stable_branch(self):
        """Validate stable_branch is not blank when given."""
        if self.stable_branch is None:
            return
        if not self.stable_branch.strip():
            raise ConfigError("stable_branch cannot be empty")
        self.stable_branch = self.stable_branch.strip()

    def _validate_remote(self):
        """Validate remote is not empty."""
        if not self.remote or not self.remote.strip():
            raise ConfigError("remote cannot be empty")
        self.remote = self.remote.strip()

    def _validate_reviewers(self):
        if not isinstance(self.reviewers, list):
            raise ConfigError("reviewers must be a list")
        self.reviewers = [r.strip().lstrip("@") for r in self.reviewers if r and r.strip()]

    def get(self, key: str, default=None):
        """Get config value by key, so services accept a Config or a plain dict."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


@dataclass
class TrainConfig:
    """Parsed contents of .pr-train.yml."""

    trains: Dict[str, Train]
    main_branch_name: Optional[str] = None
    draft_by_default: bool = False

    def find_train(self, branch_name: str) -> Optional[Train]:
        """Return the first train that lists ``branch_name``."""
        for train in self.trains.values():
            if branch_name in train:
                return train
        return None


def config_path(repo_root: Union[str, Path]) -> Path:
    return Path(repo_root) / CONFIG_FILENAME


def parse_branch_entry(raw, train_name: str) -> BranchEntry:
    """Turn one YAML list item into a SimpleBranch or BranchWithOptions."""
    if isinstance(raw, str):
        return SimpleBranch(raw)
    if isinstance(raw, dict) and len(raw) == 1:
        name, options = next(iter(raw.items()))
        options = options or {}
        if not isinstance(options, dict):
            raise ConfigError(f"Options for branch '{name}' in train '{train_name}' must be a mapping")
        init_sha = options.get("initSha")
        return BranchWithOptions(
            name=str(name),
            combined=bool(options.get("combined", False)),
            init_sha=str(init_sha) if init_sha is not None else None,
        )
    raise ConfigError(f"Unrecognised branch entry in train '{train_name}': {raw!r}")


def parse_train_config(data) -> TrainConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the top level")

    raw_trains = data.get("trains")
    if not isinstance(raw_trains, dict) or not raw_trains:
        raise ConfigError(f"No trains defined in {CONFIG_FILENAME}")

    trains = {}
    for train_name, raw_entries in raw_trains.items():
        if not isinstance(raw_entries, list):
            raise ConfigError(f"Train '{train_name}' must be a list of branches")
        entries = [parse_branch_entry(raw, train_name) for raw in raw_entries]
        trains[str(train_name)] = Train.from_entries(str(train_name), entries)

    prs = data.get("prs") or {}
    if not isinstance(prs, dict):
        raise ConfigError("'prs' section must be a mapping")

    return TrainConfig(
        trains=trains,
        main_branch_name=prs.get("main-branch-name"),
        draft_by_default=bool(prs.get("draft-by-default", False)),
    )


def load_train_config(repo_root: Union[str, Path]) -> TrainConfig:
    """Load and parse .pr-train.yml from the repository root."""
    path = config_path(repo_root)
    logger.debug(f"Loading train configuration from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"`{CONFIG_FILENAME}` file not found. Please run `git pr-train --init` to create one."
        )
    except yaml.YAMLError as e:
        raise ConfigError(f"There seems to be an error in `{CONFIG_FILENAME}`.\n{e}")
    return parse_train_config(data)


def init_config(repo_root: Union[str, Path]) -> Path:
    """Write the example configuration to the repository root."""
    path = config_path(repo_root)
    if path.exists():
        raise ConfigError(f"{CONFIG_FILENAME} already exists")
    path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    logger.info(f"Created {path}")
    return path


def read_github_token(path: Optional[Path] = None) -> str:
    """Read the GitHub access token from the credential file."""
    path = path or CREDENTIALS_PATH
    try:
        token = Path(path).read_text(encoding="utf-8").strip()
    except OSError:
        token = ""
    if not token:
        raise PreconditionError(
            f'"{path}" not found. Please make sure file exists and contains your GitHub API key.',
            exit_code=EXIT_GITHUB_SETUP,
        )
    return token
