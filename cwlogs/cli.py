#!/usr/bin/env python3
"""CloudWatch Logs CLI - query, tail and list log groups."""

import argparse
from typing import List, Optional

from rich.console import Console

from cwlogs import __version__
from cwlogs.commands import config as config_cmd
from cwlogs.commands import groups as groups_cmd
from cwlogs.commands import query as query_cmd
from cwlogs.commands import tail as tail_cmd
from cwlogs.core.client import CloudWatchLogsClient
from cwlogs.core.config import Settings, load_config
from cwlogs.core.errors import error_handler
from cwlogs.core.logging import bind_command, get_logger, setup_logging

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cwl",
        description="CloudWatch Logs CLI - A powerful tool for interacting with AWS CloudWatch Logs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-p", "--profile", help="AWS profile to use")
    parser.add_argument("-r", "--region", help="AWS region")
    parser.add_argument("--config", help="Path to config file (default: ~/.config/cwl/config.toml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    sub = parser.add_subparsers(dest="command", required=True)

    p_tail = sub.add_parser("tail", help="Stream logs in real-time")
    p_tail.add_argument("log_group", help="Log group name or alias")
    p_tail.add_argument("--follow", action="store_true", help="Follow log stream")
    p_tail.add_argument("-f", "--filter", dest="filter_pattern", help="Filter pattern")
    p_tail.add_argument("--highlight", action="store_true", help="Highlight matches")
    p_tail.add_argument("--color-levels", action="store_true",
                        help="Colour level words such as ERROR and WARN")

    p_query = sub.add_parser("query", help="Query historical logs")
    p_query.add_argument("log_group", help="Log group name or alias")
    p_query.add_argument("--since", help="Time since (e.g., 1h, 30m, 1d)")
    p_query.add_argument("--start", help="Start time (ISO 8601 or Unix timestamp)")
    p_query.add_argument("--end", help="End time (ISO 8601 or Unix timestamp)")
    p_query.add_argument("-f", "--filter", dest="filter_pattern", help="Filter pattern")
    limits = p_query.add_mutually_exclusive_group()
    limits.add_argument("--limit", type=_positive_int,
                        help="Maximum number of events (default: config max_events)")
    limits.add_argument("--no-limit", action="store_true",
                        help="Fetch every event in the time range")
    p_query.add_argument("--table", action="store_true",
                         help="Render JSON messages as a column table")
    p_query.add_argument("--color-levels", action="store_true",
                         help="Colour level words such as ERROR and WARN")

    p_groups = sub.add_parser("groups", help="List available log groups")
    p_groups.add_argument("--prefix", help="Only list groups starting with this prefix")
    p_groups.add_argument("-f", "--filter", dest="filter_pattern",
                          help="Filter log groups by regex pattern")

    p_config = sub.add_parser("config", help="Show or edit configuration")
    config_sub = p_config.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Show effective configuration")
    p_alias = config_sub.add_parser("alias", help="Add a log group alias")
    p_alias.add_argument("name", help="Alias name")
    p_alias.add_argument("group", help="Log group the alias resolves to")

    return parser


def create_client(settings: Settings, profile: Optional[str], region: Optional[str]) -> CloudWatchLogsClient:
    """Build the log store client for the chosen profile and region."""
    return CloudWatchLogsClient.create(
        profile=profile,
        region=settings.effective_region(profile, region),
    )


def _make_console(settings: Settings, no_color: bool) -> Console:
    if no_color or settings.output == "plain":
        return Console(color_system=None, highlight=False)
    return Console(highlight=False)


def _query_limit(args: argparse.Namespace, settings: Settings) -> Optional[int]:
    if args.no_limit:
        return None
    if args.limit is not None:
        return args.limit
    # A configured max_events of 0 means no limit
    return settings.max_events or None


@error_handler(reraise=False, exclude=(KeyboardInterrupt, SystemExit))
def _dispatch(args: argparse.Namespace) -> int:
    settings = load_config(args.config)
    setup_logging("DEBUG" if args.verbose else settings.log_level, enable_debug=args.verbose)
    console = _make_console(settings, args.no_color)
    bind_command(args.command)
    logger.debug("command_started", profile=args.profile, region=args.region)

    if args.command == "config":
        if args.config_command == "alias":
            config_cmd.add_alias(settings, console, args.name, args.group)
        else:
            config_cmd.show(settings, console)
        return 0

    client = create_client(settings, args.profile, args.region)

    if args.command == "groups":
        groups_cmd.run(client, console, prefix=args.prefix, filter_pattern=args.filter_pattern)
        return 0

    log_group = settings.resolve_group(args.log_group)
    bind_command(args.command, log_group)

    if args.command == "tail":
        tail_cmd.run(
            client,
            console,
            log_group,
            follow_mode=args.follow,
            filter_pattern=args.filter_pattern,
            highlight=args.highlight,
            color_levels=args.color_levels,
        )
        return 0

    if args.command == "query":
        query_cmd.run(
            client,
            console,
            log_group,
            since=args.since,
            start=args.start,
            end=args.end,
            filter_pattern=args.filter_pattern,
            limit=_query_limit(args, settings),
            table=args.table,
            color_levels=args.color_levels,
        )
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the `cwl` command.

    Returns:
        0 on success, 1 on a reported error, 2 on usage errors
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        code = _dispatch(args)
    except KeyboardInterrupt:
        return 130
    return 1 if code is None else code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
