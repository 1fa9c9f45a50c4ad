"""Pull request records kept for one synchronization run"""
from enum import Enum
from dataclasses import dataclass, field
from typing import List


class PRStatus(Enum):
    """Whether a PR was found on the remote or created by this run."""
    EXISTING = "existing"
    NEW = "new"


@dataclass
class PRRecord:
    """Remote pull request backing one train branch."""
    branch: str
    number: int
    title: str
    body: str
    base: str
    status: PRStatus
    reviewers: List[str] = field(default_factory=list)

    @property
    def is_existing(self) -> bool:
        return self.status is PRStatus.EXISTING

    @property
    def is_new(self) -> bool:
        return self.status is PRStatus.NEW


@dataclass(frozen=True)
class NavigationEntry:
    """One line of the navigation block."""
    number: int
    title: str
    combined: bool = False
    current: bool = False
