"""Command-line entry point for git-pr-train"""

import os
import sys

from rich.console import Console
from rich.markup import escape

from git_pr_train.cli.args import parse_args
from git_pr_train.config import Config, read_github_token
from git_pr_train.constants import EXIT_GENERAL, EXIT_OK, SYMBOL_FAIL
from git_pr_train.core import PRTrain
from git_pr_train.exceptions import ConflictFailure, PrTrainError
from git_pr_train.logging_config import setup_logging

console = Console()


def build_config(parsed_args) -> Config:
    return Config(
        stable_branch=parsed_args.stable_branch,
        remote=parsed_args.remote,
        rebase=parsed_args.rebase,
        force=parsed_args.force,
        push_merged=parsed_args.push_merged,
        draft=parsed_args.draft,
        reviewers=parsed_args.reviewers or [],
        combined_title=parsed_args.combined_title,
        assume_yes=parsed_args.yes,
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
    )


def run(parsed_args, repo_path: str) -> int:
    """Dispatch one invocation. Errors propagate to ``main``."""
    if parsed_args.create_prs:
        read_github_token()

    train = PRTrain(repo_path, build_config(parsed_args))

    if parsed_args.init:
        train.init_config()
        return EXIT_OK

    train.load()

    # Switching hands control back to the shell on the new branch
    if parsed_args.index is not None:
        train.switch_to(parsed_args.index)
        return EXIT_OK
    if parsed_args.next or parsed_args.prev:
        train.step(1 if parsed_args.next else -1)
        return EXIT_OK

    train.list_branches()
    if parsed_args.list:
        return EXIT_OK

    # Reflowing would move branch heads and change PR titles, so only push and sync
    if parsed_args.create_prs:
        train.create_prs(parsed_args.branch_range)
        return EXIT_OK

    train.reflow()
    if parsed_args.push or parsed_args.push_merged:
        train.push(parsed_args.branch_range)
    return EXIT_OK


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    if parsed_args.debug:
        console.print("[yellow]Debug mode enabled[/yellow]")

    try:
        return run(parsed_args, os.getcwd())
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return EXIT_GENERAL
    except ConflictFailure as e:
        console.print(f"[red]{SYMBOL_FAIL}  {escape(str(e))}[/red]")
        return e.exit_code
    except PrTrainError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
