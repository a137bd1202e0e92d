"""Command-line access to the agent tools.

Useful for checking database credentials and the speech API key without
going through a model: ``voxquery tools query "SHOW TABLES"``.
"""

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from voxquery.assistant import tools as registry
from voxquery.logging import get_logger
from voxquery.tools import query, speech


def register_subcommands(subparsers):
    """Attach ``tools`` subcommands to an ``argparse`` parser.

    Examples
    --------
    >>> import argparse
    >>> parser = argparse.ArgumentParser(prog="voxquery tools")
    >>> subparsers = parser.add_subparsers(dest="subcommand", required=True)
    >>> register_subcommands(subparsers)
    >>> parser.parse_args(["speak", "hello", "--voice", "Puck"])
    Namespace(output_dir=None, subcommand='speak', text='hello', voice='Puck')
    """

    subparsers.add_parser("list", help="List the registered tools")

    query_parser = subparsers.add_parser("query", help="Run a SQL statement through the query tool")
    query_parser.add_argument("statement", help="SELECT, DESCRIBE, SHOW or INSERT statement")
    query_parser.add_argument("--database", help="SQLAlchemy URL overriding VOXQUERY_DB_URL")

    speak_parser = subparsers.add_parser("speak", help="Synthesize text into a WAV file")
    speak_parser.add_argument("text", help="Text to convert to speech")
    speak_parser.add_argument("--voice", default=speech.DEFAULT_VOICE, help="Prebuilt voice name")
    speak_parser.add_argument("--output-dir", help="Directory for the WAV file (default: VOXQUERY_SOUNDS_DIR or ./sounds)")

    call_parser = subparsers.add_parser("call", help="Call a tool by name with JSON arguments")
    call_parser.add_argument("name", help="Tool name")
    call_parser.add_argument("--args", default="{}", help="JSON object of tool arguments")


def _render_tools(specs: list[dict[str, Any]], console: Console | None = None) -> None:
    """Pretty-print the tool specs using ``rich``."""

    if console is None:
        console = Console()

    table = Table(title="voxquery tools", show_lines=True)
    table.add_column("Tool", style="bold cyan")
    table.add_column("Argument", style="magenta")
    table.add_column("Required", justify="center", style="yellow")
    table.add_column("Description", style="bright_black")

    for spec in specs:
        function = spec.get("function") or {}
        parameters = function.get("parameters") or {}
        required = set(parameters.get("required") or [])
        properties = parameters.get("properties") or {}
        for index, (arg_name, arg_spec) in enumerate(properties.items()):
            table.add_row(
                str(function.get("name", "")) if index == 0 else "",
                arg_name,
                "Yes" if arg_name in required else "No",
                str(arg_spec.get("description", "")),
            )

    console.print(table)


def dispatch(args):
    """Dispatch tools CLI subcommands.

    Unknown subcommands raise ``ValueError``. ``call`` exits with status 2
    when ``--args`` is not a JSON object.
    """

    logger = get_logger(__name__)

    def _list() -> None:
        _render_tools(registry.openai_tools())

    def _query() -> None:
        print(query.execute(args.statement, db_url=getattr(args, "database", None)))

    def _speak() -> None:
        print(speech.synthesize(args.text, args.voice, output_dir=getattr(args, "output_dir", None)))

    def _call() -> None:
        try:
            tool_args = json.loads(args.args)
        except json.JSONDecodeError as exc:
            raise SystemExit(f"--args is not valid JSON: {exc}") from exc
        if not isinstance(tool_args, dict):
            raise SystemExit("--args must be a JSON object")
        print(registry.run_tool(args.name, tool_args))

    commands = {"list": _list, "query": _query, "speak": _speak, "call": _call}
    try:
        handler = commands[args.subcommand]
    except KeyError as exc:
        message = f"No handler for tools subcommand: {args.subcommand}"
        logger.error(message)
        raise ValueError(message) from exc

    handler()
