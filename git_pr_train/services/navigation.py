"""Navigation block rendered into every PR body of a train.

The block lists each PR of the train in order, wrapped in sentinel tags so a
later run can find and replace it::

    <pr-train-toc>

    #### PR chain:
    👉 #101 (Add parser) 👈 **YOU ARE HERE**
    #102 (Wire parser into CLI)
    #103 **[combined branch]** (Parser feature)

    </pr-train-toc>
"""

import re
from typing import Iterable, List, Mapping, Optional

from git_pr_train.constants import (
    COMBINED_LABEL,
    POINTER_LEFT,
    POINTER_RIGHT,
    TOC_END,
    TOC_HEADING,
    TOC_START,
    YOU_ARE_HERE,
)
from git_pr_train.models.pull_request import NavigationEntry, PRRecord

# Innermost pair only: a block never spans a second start marker
_TOC_RE = re.compile(
    re.escape(TOC_START) + r"(?:(?!" + re.escape(TOC_START) + r")[\s\S])*?" + re.escape(TOC_END)
)


def build_entries(
    records: Mapping[str, PRRecord],
    current_branch: str,
    combined_branch: Optional[str] = None,
) -> List[NavigationEntry]:
    """Navigation entries for ``current_branch``, in the order of ``records``."""
    return [
        NavigationEntry(
            number=record.number,
            title=record.title,
            combined=branch == combined_branch,
            current=branch == current_branch,
        )
        for branch, record in records.items()
    ]


def format_entry(entry: NavigationEntry) -> str:
    line = f"#{entry.number}"
    if entry.combined:
        line += f" {COMBINED_LABEL}"
    line += f" ({entry.title.strip()})"
    if entry.current:
        line = f"{POINTER_RIGHT} {line} {POINTER_LEFT} {YOU_ARE_HERE}"
    return line


def render_navigation(entries: Iterable[NavigationEntry]) -> str:
    lines = [TOC_START, "", TOC_HEADING]
    lines.extend(format_entry(entry) for entry in entries)
    lines.extend(["", TOC_END])
    return "\n".join(lines)


def has_navigation(body: Optional[str]) -> bool:
    return bool(body) and _TOC_RE.search(body) is not None


def upsert_navigation(navigation: str, body: Optional[str]) -> str:
    """Replace the delimited block in ``body`` or append it after one newline."""
    body = body or ""
    matches = list(_TOC_RE.finditer(body))
    if matches:
        last = matches[-1]
        return body[: last.start()] + navigation + body[last.end() :]
    return body + "\n" + navigation
