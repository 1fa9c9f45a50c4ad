"""Train model: an ordered chain of dependent branches."""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from git_pr_train.constants import COMBINED_ALIAS
from git_pr_train.exceptions import BranchNotFoundError, ConfigError


@dataclass(frozen=True)
class SimpleBranch:
    """Bare branch name entry from the config file."""
    name: str


@dataclass(frozen=True)
class BranchWithOptions:
    """Branch entry that carries options in the config file."""
    name: str
    combined: bool = False
    init_sha: Optional[str] = None


BranchEntry = Union[SimpleBranch, BranchWithOptions]


@dataclass(frozen=True)
class BranchRef:
    """A branch at a fixed position of a train."""
    name: str
    index: int
    combined: bool = False
    init_sha: Optional[str] = None  # informational only


_RANGE_RE = re.compile(r"^\s*(\d*)\s*\.\.\s*(\d*)\s*$")


def parse_range(value: str) -> slice:
    """Convert an inclusive ``start..end`` range into a half-open slice.

    Either end may be omitted: ``2..`` selects from index 2 to the tip and
    ``..1`` selects the first two branches.
    """
    match = _RANGE_RE.match(value)
    if not match:
        raise ValueError(f"Invalid branch range '{value}', expected <start>..<end>")
    start_text, end_text = match.groups()
    start = int(start_text) if start_text else 0
    stop = int(end_text) + 1 if end_text else None
    if stop is not None and stop <= start:
        raise ValueError(f"Invalid branch range '{value}': end is before start")
    return slice(start, stop)


class Train:
    """Ordered branches of one train, from the stable branch toward the tip."""

    def __init__(self, name: str, branches: List[BranchRef]):
        self.name = name
        self.branches = branches

    @classmethod
    def from_entries(cls, name: str, entries: List[BranchEntry]) -> "Train":
        """Build a train from parsed config entries, validating its shape."""
        if not entries:
            raise ConfigError(f"Train '{name}' has no branches")

        refs: List[BranchRef] = []
        seen = set()
        for index, entry in enumerate(entries):
            if entry.name in seen:
                raise ConfigError(f"Branch '{entry.name}' appears twice in train '{name}'")
            seen.add(entry.name)
            if isinstance(entry, BranchWithOptions):
                refs.append(BranchRef(entry.name, index, entry.combined, entry.init_sha))
            else:
                refs.append(BranchRef(entry.name, index))

        combined = [ref for ref in refs if ref.combined]
        if len(combined) > 1:
            raise ConfigError(
                f"Train '{name}' has more than one combined branch: "
                f"{', '.join(ref.name for ref in combined)}"
            )
        if combined and combined[0].index != len(refs) - 1:
            raise ConfigError(
                f"Combined branch '{combined[0].name}' must be the last branch of train '{name}'"
            )
        return cls(name, refs)

    def __iter__(self) -> Iterator[BranchRef]:
        return iter(self.branches)

    def __len__(self) -> int:
        return len(self.branches)

    def __contains__(self, branch_name: str) -> bool:
        return any(ref.name == branch_name for ref in self.branches)

    @property
    def names(self) -> List[str]:
        return [ref.name for ref in self.branches]

    @property
    def combined_branch(self) -> Optional[BranchRef]:
        last = self.branches[-1]
        return last if last.combined else None

    def get(self, branch_name: str) -> BranchRef:
        for ref in self.branches:
            if ref.name == branch_name:
                return ref
        raise BranchNotFoundError(branch_name)

    def branch_at(self, index: Union[int, str]) -> BranchRef:
        """Resolve a numeric index or the ``combined`` alias to a branch."""
        if index == COMBINED_ALIAS:
            if self.combined_branch is None:
                raise BranchNotFoundError(index)
            return self.combined_branch
        try:
            position = int(index)
        except (TypeError, ValueError):
            raise BranchNotFoundError(index)
        if position < 0 or position >= len(self.branches):
            raise BranchNotFoundError(index)
        return self.branches[position]

    def next_of(self, branch_name: str) -> BranchRef:
        return self.branch_at(self.get(branch_name).index + 1)

    def previous_of(self, branch_name: str) -> BranchRef:
        position = self.get(branch_name).index - 1
        if position < 0:
            raise BranchNotFoundError(position)
        return self.branches[position]

    def base_of(self, branch_name: str, stable_branch: str) -> str:
        """Branch a PR for ``branch_name`` should target.

        The first branch and the combined branch target the stable branch,
        every other branch targets its predecessor.
        """
        ref = self.get(branch_name)
        if ref.index == 0 or ref.combined:
            return stable_branch
        return self.branches[ref.index - 1].name

    def select(self, selection: Optional[slice] = None) -> List[BranchRef]:
        if selection is None:
            return list(self.branches)
        return self.branches[selection]

    def pairs(self) -> Iterator[tuple]:
        """Consecutive (upstream, downstream) pairs in train order."""
        for upstream, downstream in zip(self.branches, self.branches[1:]):
            yield upstream, downstream

    def __repr__(self) -> str:
        return f"Train({self.name!r}, {self.names!r})"
