"""Command-line helpers for configuring voxquery logging."""

import logging

from voxquery.logging import get_logger, reset_logger
from voxquery.logging.logging import get_configured_level, _resolve_log_file
from voxquery.logging.config import load_log_level, save_log_level


def register_subcommands(subparsers):
    set_level_parser = subparsers.add_parser(
        "set-level", help="Set and persist the logging level"
    )
    set_level_parser.add_argument(
        "level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level to use",
    )

    subparsers.add_parser("show-path", help="Show the log file location")
    subparsers.add_parser(
        "show-level", help="Show the configured logging level"
    )


def dispatch(args):
    """Execute the logging command associated with ``args.subcommand``."""

    if args.subcommand == "set-level":
        level_name = args.level.upper()
        save_log_level(level_name)
        reset_logger()
        get_logger(level=getattr(logging, level_name))
    elif args.subcommand == "show-path":
        print(_resolve_log_file().resolve())
    elif args.subcommand == "show-level":
        persisted = load_log_level()
        if persisted is not None:
            print(logging.getLevelName(persisted))
        else:
            print(get_configured_level())
    else:
        get_logger(__name__).error("No handler for subcommand: %s", args.subcommand)
