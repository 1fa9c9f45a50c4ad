"""Command-line argument parsing for git-pr-train."""

import argparse

from git_pr_train.__version__ import __version__
from git_pr_train.constants import COMBINED_ALIAS, DEFAULT_REMOTE
from git_pr_train.models.train import parse_range


def _branch_range(value: str) -> slice:
    try:
        return parse_range(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git pr-train",
        description="Manage a train of dependent branches and their GitHub PRs",
        epilog=(
            f"Switching branches: `git pr-train <index>` switches to the branch with that index; "
            f"`git pr-train {COMBINED_ALIAS}` switches to the combined branch. "
            "Creating PRs needs a ${HOME}/.pr-train file containing your GitHub access token."
        ),
    )
    parser.add_argument(
        "index",
        nargs="?",
        help=f"Switch to the branch with this index (or '{COMBINED_ALIAS}') and exit",
    )
    parser.add_argument("--version", action="version", version=f"git-pr-train {__version__}")
    parser.add_argument(
        "--init", action="store_true", help="Create a .pr-train.yml file with an example configuration"
    )
    parser.add_argument("-l", "--list", action="store_true", help="List branches in current train")
    step = parser.add_mutually_exclusive_group()
    step.add_argument("--next", action="store_true", help="Switch to the next branch in the train")
    step.add_argument("--prev", action="store_true", help="Switch to the previous branch in the train")
    parser.add_argument("-p", "--push", action="store_true", help="Push changes after reflowing")
    parser.add_argument(
        "-r", "--rebase", action="store_true", help="Rebase branches rather than merging them"
    )
    parser.add_argument("-f", "--force", action="store_true", help="Force push to remote")
    parser.add_argument(
        "--push-merged",
        action="store_true",
        help="Push all branches (including those that have already been merged into the stable branch)",
    )
    parser.add_argument(
        "--remote", default=DEFAULT_REMOTE, help=f'Remote to push to (default: "{DEFAULT_REMOTE}")'
    )
    parser.add_argument(
        "--stable-branch",
        help="Branch the train merges into (default: prs.main-branch-name or master)",
    )
    parser.add_argument(
        "--range",
        dest="branch_range",
        type=_branch_range,
        metavar="START..END",
        help="Only push / create PRs for branches START through END (inclusive)",
    )
    parser.add_argument(
        "-c", "--create-prs", action="store_true", help="Create GitHub PRs from your train branches"
    )
    parser.add_argument("--reviewers", nargs="*", default=[], help="Request reviews from these users")
    parser.add_argument("--draft", action="store_true", help="Open new PRs as drafts")
    parser.add_argument("--combined-title", help="Title of the combined branch PR")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmations")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
