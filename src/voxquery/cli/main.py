# voxquery/cli/main.py
import argparse
import sys

from voxquery.cli import logging as logging_cli, tools
from voxquery.cli.env import extract_env_files, load_env_files


def main(argv=None):

    env_files, remaining = extract_env_files(sys.argv[1:] if argv is None else argv)
    if env_files:
        load_env_files(env_files)

    parser = argparse.ArgumentParser(prog="voxquery", description="voxquery agent tool CLI")
    parser.add_argument(
        "--env-file",
        action="append",
        help="Load KEY=value pairs from a file before running (repeatable)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tools_parser = subparsers.add_parser("tools", help="Inspect and run agent tools")
    tools_subparsers = tools_parser.add_subparsers(dest="subcommand", required=True)
    tools.register_subcommands(tools_subparsers)

    logging_parser = subparsers.add_parser("logging", help="Logging utilities")
    logging_subparsers = logging_parser.add_subparsers(
        dest="subcommand", required=True
    )
    logging_cli.register_subcommands(logging_subparsers)

    args = parser.parse_args(remaining)

    if args.command == "tools":
        tools.dispatch(args)
    elif args.command == "logging":
        logging_cli.dispatch(args)
