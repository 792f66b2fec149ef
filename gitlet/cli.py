"""
Command layer: validates arity, opens the repository, runs one operation and
prints a single human-readable result.

Failures and successes exit identically; the message is the only signal.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable

from gitlet.config import GitletSettings
from gitlet.errors import GitletError, UsageError
from gitlet.logging_config import configure_logging
from gitlet.merge import MergeOutcome
from gitlet.objects import format_log_entry
from gitlet.repository import Repository, init_repository, open_repository

NO_COMMAND = "Please enter a command."
UNKNOWN_COMMAND = "No command with that name exists."


class CommandParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError()


def build_parser() -> CommandParser:
    parser = CommandParser(
        prog="gitlet", description="A small content-addressed version-control system."
    )
    sub = parser.add_subparsers(dest="command", metavar="command")

    sub.add_parser("init", help="Create a repository in the current directory")
    sub.add_parser("add", help="Stage a file").add_argument("path")
    sub.add_parser("commit", help="Record staged changes").add_argument("message")
    sub.add_parser("rm", help="Unstage or remove a file").add_argument("path")
    sub.add_parser("log", help="First-parent history of the current branch")
    sub.add_parser("global-log", help="Every commit ever made")
    sub.add_parser("find", help="Ids of commits with a message").add_argument("message")
    sub.add_parser("status", help="Branches, staged and untracked files")
    sub.add_parser(
        "checkout", help="checkout <branch> | -- <path> | <commit> -- <path>"
    ).add_argument("operands", nargs=argparse.REMAINDER)
    sub.add_parser("branch", help="Create a branch at the current commit").add_argument("name")
    sub.add_parser("rm-branch", help="Delete a branch pointer").add_argument("name")
    sub.add_parser("reset", help="Hard reset the current branch").add_argument("commit")
    sub.add_parser("merge", help="Merge a branch into the current one").add_argument("branch")
    return parser


def _log(repo: Repository, args: argparse.Namespace) -> None:
    for commit_id, commit in repo.log():
        print(format_log_entry(commit_id, commit))


def _global_log(repo: Repository, args: argparse.Namespace) -> None:
    for commit_id, commit in repo.global_log():
        print(format_log_entry(commit_id, commit))


def _find(repo: Repository, args: argparse.Namespace) -> None:
    for commit_id in repo.find(args.message):
        print(commit_id)


def _status(repo: Repository, args: argparse.Namespace) -> None:
    print(repo.status().render())


def _checkout(repo: Repository, args: argparse.Namespace) -> None:
    branch, commit_ref, path = args.checkout_target
    if path is None:
        repo.switch_branch(branch)
    else:
        repo.checkout_file(path, commit_ref)


def _merge(repo: Repository, args: argparse.Namespace) -> None:
    result = repo.merge(args.branch)
    if result.outcome is MergeOutcome.ALREADY_ANCESTOR:
        print("Given branch is an ancestor of the current branch.")
    elif result.outcome is MergeOutcome.FAST_FORWARDED:
        print("Current branch fast-forwarded.")
    elif result.conflicted:
        print("Encountered a merge conflict.")


COMMANDS: dict[str, Callable[[Repository, argparse.Namespace], None]] = {
    "add": lambda repo, args: repo.add(args.path),
    "commit": lambda repo, args: repo.commit(args.message),
    "rm": lambda repo, args: repo.remove(args.path),
    "log": _log,
    "global-log": _global_log,
    "find": _find,
    "status": _status,
    "checkout": _checkout,
    "branch": lambda repo, args: repo.create_branch(args.name),
    "rm-branch": lambda repo, args: repo.remove_branch(args.name),
    "reset": lambda repo, args: repo.reset(args.commit),
    "merge": _merge,
}


def parse_checkout(operands: list[str]) -> tuple[str | None, str | None, str | None]:
    """Split checkout operands into ``(branch, commit, path)``."""
    if len(operands) == 1 and operands[0] != "--":
        return operands[0], None, None
    if len(operands) == 2 and operands[0] == "--":
        return None, None, operands[1]
    if len(operands) == 3 and operands[1] == "--":
        return None, operands[0], operands[2]
    raise UsageError()


def run(argv: list[str], cwd: Path, settings: GitletSettings) -> None:
    if not argv:
        raise UsageError(NO_COMMAND)
    if argv[0] != "init" and argv[0] not in COMMANDS and not argv[0].startswith("-"):
        raise UsageError(UNKNOWN_COMMAND)

    if argv[0] == "checkout":
        # argparse may drop "--", which is what tells a path from a branch.
        args = argparse.Namespace(
            command="checkout", checkout_target=parse_checkout(argv[1:])
        )
    else:
        args = build_parser().parse_args(argv)
    if args.command is None:
        raise UsageError(NO_COMMAND)

    if args.command == "init":
        init_repository(cwd, settings)
        return

    with open_repository(cwd, settings) as repo:
        COMMANDS[args.command](repo, args)


def main(argv: list[str] | None = None, cwd: str | Path | None = None) -> int:
    settings = GitletSettings.from_env()
    configure_logging(settings.log_level)
    try:
        run(
            list(sys.argv[1:] if argv is None else argv),
            Path.cwd() if cwd is None else Path(cwd),
            settings,
        )
    except GitletError as e:
        print(e.message)
    return 0
