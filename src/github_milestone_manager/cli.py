"""
Command-line interface for the GitHub milestone manager.

Examples:
    # List all milestones in an organization (across all repos):
    ghmm list pulumi

    # Change a milestone due date across all repos, matched by title:
    ghmm set pulumi 0.20 1/13/2019 --yes

    # Close a milestone across all repos, matched by title:
    ghmm close pulumi 0.20 --yes
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap

from . import github_utils as ghu
from .aggregator import aggregate_milestones
from .config import ReconcileConfig
from .due_dates import parse_due_date
from .exceptions import ArgumentError, MilestoneManagerError
from .models import RepositoryRef
from .planner import MutationPlanner
from .presenter import render_milestones
from .resolver import resolve_repositories
from .utils import PassError, setup_logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ghmm",
        description="Manage GitHub milestones across all repositories of an organization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
            Mutating commands only report what they would change unless --yes is given.
        """),
    )
    _ = parser.add_argument("--token", "-t", help="GitHub access token (default: GITHUB_TOKEN or pass)")
    _ = parser.add_argument(
        "--github-pass-token", help="Path for GitHub token in pass utility (default: github/cli/token)"
    )
    _ = parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase verbosity (-v for info, -vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List milestones in an org or repo")
    _ = list_parser.add_argument("target", help="Organization name or repository path (owner/repo)")
    list_parser.set_defaults(handler=_run_list)

    set_parser = subparsers.add_parser("set", help="Set a milestone's due date")
    _ = set_parser.add_argument("target", help="Organization name or repository path (owner/repo)")
    _ = set_parser.add_argument("title", help="Milestone title whose date to set (not its number)")
    _ = set_parser.add_argument("due_date", help="New due date in M/D/YYYY format")
    set_parser.set_defaults(handler=_run_set)

    close_parser = subparsers.add_parser("close", help="Close a milestone by title")
    _ = close_parser.add_argument("target", help="Organization name or repository path (owner/repo)")
    _ = close_parser.add_argument("title", help="Milestone title to close (not its number)")
    close_parser.set_defaults(handler=_run_close)

    open_parser = subparsers.add_parser("open", help="Open a milestone with a given title and due date")
    _ = open_parser.add_argument("target", help="Organization name or repository path (owner/repo)")
    _ = open_parser.add_argument("title", help="Milestone title to open")
    _ = open_parser.add_argument("due_date", help="Due date in M/D/YYYY format")
    open_parser.set_defaults(handler=_run_open)

    for mutating_parser in (set_parser, close_parser, open_parser):
        _ = mutating_parser.add_argument(
            "--yes", "-y", action="store_true", help="Actually perform the operation instead of just dry-running it"
        )

    return parser.parse_args(argv)


def _require(value: str, what: str) -> str:
    if not value.strip():
        msg = f"Missing {what}"
        raise ArgumentError(msg)
    return value


def _check_target(target: str) -> str:
    """Reject a malformed target before any token lookup or remote call."""
    _require(target, "repository or organization name")
    if "/" in target:
        RepositoryRef.parse(target)
    return target


def _make_provider(args: argparse.Namespace) -> ghu.GithubMilestoneProvider:
    token: str | None = args.token or ghu.get_token(args.github_pass_token)
    return ghu.GithubMilestoneProvider(ghu.get_client(token))


def _make_planner(args: argparse.Namespace) -> MutationPlanner:
    return MutationPlanner(_make_provider(args), ReconcileConfig(confirm=args.yes))


def _run_list(args: argparse.Namespace) -> bool:
    _check_target(args.target)
    provider = _make_provider(args)
    repositories = resolve_repositories(provider, args.target)
    result = aggregate_milestones(provider, repositories)
    render_milestones(result)
    return True


def _run_set(args: argparse.Namespace) -> bool:
    _check_target(args.target)
    title = _require(args.title, "milestone title whose date to set (not its number)")
    due_on = parse_due_date(args.due_date)
    planner = _make_planner(args)
    repositories = resolve_repositories(planner.provider, args.target)
    return planner.set_due_date(repositories, title, due_on).success


def _run_close(args: argparse.Namespace) -> bool:
    _check_target(args.target)
    title = _require(args.title, "milestone title to close (not its number)")
    planner = _make_planner(args)
    repositories = resolve_repositories(planner.provider, args.target)
    return planner.close(repositories, title).success


def _run_open(args: argparse.Namespace) -> bool:
    _check_target(args.target)
    title = _require(args.title, "milestone title to open")
    due_on = parse_due_date(args.due_date)
    return MutationPlanner.open(title, due_on).success


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    verbosity: int = getattr(args, "verbose", 0)
    setup_logging(verbosity=verbosity)

    try:
        success = args.handler(args)
    except (MilestoneManagerError, NotImplementedError, PassError) as e:
        logger.error(str(e))  # noqa: TRY400
        sys.exit(1)
    except Exception:
        logger.exception("Command failed")
        sys.exit(1)

    sys.exit(0 if success else 1)
