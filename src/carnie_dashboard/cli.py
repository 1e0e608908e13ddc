#!/usr/bin/env python3
"""Command line entry point for carnie-dashboard.

Usage:
    carnie-dashboard                       # launch the dashboard
    carnie-dashboard run --refresh 10      # same, refreshing every 10s
    carnie-dashboard run --issues-file x.jsonl
    carnie-dashboard tree                  # print the Future Work tree
    carnie-dashboard tree --closed         # print the Completed Work tree
"""

import argparse
import logging
import sys

from .config import ConfigError, load_config
from .data import BeadsDataProvider, DataFetchError, JsonlDataProvider
from .logs import setup_logging
from .navigator import partition_issues
from .tree import build_tree

logger = logging.getLogger(__name__)


def _provider(config):
    if config.issues_file:
        return JsonlDataProvider(config.issues_file)
    return BeadsDataProvider(start_dir=config.start_dir, bd_binary=config.bd_binary)


def cmd_run(config, _args):
    from .app import run_app

    logger.info("starting dashboard (refresh=%ss, limit=%d)", config.refresh_seconds, config.limit)
    run_app(_provider(config), config)


def cmd_tree(config, args):
    try:
        snapshot = _provider(config).fetch_snapshot()
    except DataFetchError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    future, completed = partition_issues(snapshot.issues, config.limit)
    tree = build_tree(completed if args.closed else future, snapshot.edges)
    for issue in tree.ordered:
        print(
            "id=%s level=%d parent=%s status=%s title=%s"
            % (
                issue.id,
                tree.depth_of.get(issue.id, 0),
                tree.parent_of.get(issue.id, "") or "-",
                issue.status,
                issue.title,
            )
        )


def _add_data_flags(parser):
    # SUPPRESS keeps a subcommand from masking flags given before it.
    opts = {"default": argparse.SUPPRESS}
    parser.add_argument(
        "--refresh",
        dest="refresh_seconds",
        help="Seconds between refreshes, 0 disables auto refresh (default 6)",
        **opts
    )
    parser.add_argument("--limit", help="Max issues per list, 0 for no limit (default 200)", **opts)
    parser.add_argument("--issues-file", help="Read this issues.jsonl instead of calling bd", **opts)
    parser.add_argument("--dir", dest="start_dir", help="Directory to look for .beads from", **opts)
    parser.add_argument("--bd", dest="bd_binary", help="Path to the bd executable", **opts)
    parser.add_argument("--log-file", help="Log file path, empty to disable", **opts)
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL", **opts)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="carnie-dashboard",
        description="Terminal dashboard for a beads issue tracker",
    )
    _add_data_flags(parser)
    sub = parser.add_subparsers(dest="command")

    # run
    p_run = sub.add_parser("run", help="Launch the dashboard (default)")
    _add_data_flags(p_run)

    # tree
    p_tree = sub.add_parser("tree", help="Print the issue tree and exit")
    p_tree.add_argument("--closed", action="store_true", help="Show Completed Work")
    _add_data_flags(p_tree)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(vars(args))
    except ConfigError as exc:
        print("carnie-dashboard: %s" % exc, file=sys.stderr)
        sys.exit(2)

    setup_logging(config.log_file, config.log_level)

    dispatch = {
        "run": cmd_run,
        "tree": cmd_tree,
    }
    dispatch[args.command or "run"](config, args)


if __name__ == "__main__":
    main()
