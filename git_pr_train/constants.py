"""Shared constants for git-pr-train."""

from pathlib import Path

DEFAULT_REMOTE = "origin"
DEFAULT_STABLE_BRANCH = "master"

CONFIG_FILENAME = ".pr-train.yml"
CREDENTIALS_PATH = Path.home() / ".pr-train"

# Index alias that resolves to the combined branch of a train
COMBINED_ALIAS = "combined"

# Seconds to wait after each reflow step so git can release index.lock
MERGE_STEP_DELAY = 0.5
# Seconds to wait before retrying a combine that failed without conflicts
MERGE_STEP_DELAY_WAIT_FOR_LOCK = 2.5

# Sentinels delimiting the navigation block inside PR bodies
TOC_START = "<pr-train-toc>"
TOC_END = "</pr-train-toc>"
TOC_HEADING = "#### PR chain:"
COMBINED_LABEL = "**[combined branch]**"
YOU_ARE_HERE = "**YOU ARE HERE**"
POINTER_RIGHT = "👉"
POINTER_LEFT = "👈"

# Symbols for console output
SYMBOL_OK = "✅"
SYMBOL_FAIL = "❌"

# Process exit codes, one per family of fatal precondition
EXIT_OK = 0
EXIT_GENERAL = 1
EXIT_BRANCH_NOT_FOUND = 3
EXIT_GITHUB_SETUP = 4
EXIT_MISSING_TITLE = 5

CONFIG_TEMPLATE = """\
# Configuration for git pr-train. Keep this file out of version control.
prs:
  # Branch every train ultimately merges into
  main-branch-name: master
  # Open newly created PRs as drafts
  draft-by-default: false

trains:
  # Train with a combined branch at its tip
  my-feature:
    - my-feature-part-1
    - my-feature-part-2
    - my-feature-combined:
        combined: true

  # Train without a combined branch
  another-feature:
    - another-feature-1
    - another-feature-2
"""
