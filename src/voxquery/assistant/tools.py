from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from voxquery.logging import get_logger
from voxquery.tools import query as query_tool
from voxquery.tools import speech as speech_tool
from voxquery.tools.results import ToolResult


logger = get_logger(__name__)


class QueryArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str = Field(description="The SQL query to execute (SELECT, DESCRIBE, SHOW, or INSERT)")


class AudioArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = Field(description="The content to convert to speech")
    voice_name: str | None = Field(
        default=None,
        description=(
            'The name of the voice to use for the speech (e.g., "Charon", "Puck"). '
            'Defaults to "Charon" if not specified.'
        ),
    )


_QUERY_DESCRIPTION = (
    "Executes SQL queries against a MySQL database.\n"
    "Use this for:\n"
    "- SELECT queries to retrieve data from tables\n"
    "- DESCRIBE queries to see table structure\n"
    "- SHOW TABLES to list available tables\n"
    "- INSERT queries to add new rows\n"
    "\n"
    "Always use the exact table names from the database."
)

_AUDIO_DESCRIPTION = (
    "Generates an audio file from the given text and saves it to the local file system.\n"
    "The 'text' parameter is the content to convert to speech.\n"
    "The 'voice_name' parameter specifies the voice to use, such as "
    + ", ".join(f'"{name}"' for name in speech_tool.KNOWN_VOICES[:-1])
    + f', or "{speech_tool.KNOWN_VOICES[-1]}".'
)


def _run_query(args: QueryArgs) -> ToolResult:
    return query_tool.run_query(args.query)


def _run_audio(args: AudioArgs) -> ToolResult:
    return speech_tool.generate_audio(args.text, args.voice_name)


_TOOLS: dict[str, tuple[type[BaseModel], Callable[[Any], ToolResult]]] = {
    query_tool.TOOL_NAME: (QueryArgs, _run_query),
    speech_tool.TOOL_NAME: (AudioArgs, _run_audio),
}

_OPENAI_TOOL_SPECS: dict[str, dict[str, Any]] = {
    query_tool.TOOL_NAME: {
        "type": "function",
        "function": {
            "name": query_tool.TOOL_NAME,
            "description": _QUERY_DESCRIPTION,
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": QueryArgs.model_fields["query"].description,
                    },
                },
                "required": ["query"],
            },
        },
    },
    speech_tool.TOOL_NAME: {
        "type": "function",
        "function": {
            "name": speech_tool.TOOL_NAME,
            "description": _AUDIO_DESCRIPTION,
            "parameters": {
                "type": "object",
                "properties": {
                    "text": {
                        "type": "string",
                        "description": AudioArgs.model_fields["text"].description,
                    },
                    "voice_name": {
                        "type": "string",
                        "description": AudioArgs.model_fields["voice_name"].description,
                    },
                },
                "required": ["text"],
            },
        },
    },
}


def tool_names() -> list[str]:
    return list(_TOOLS)


def openai_tools() -> list[dict[str, Any]]:
    """Return OpenAI-compatible tool schemas for every registered tool."""

    return [_OPENAI_TOOL_SPECS[name] for name in _TOOLS]


def tool_prompt() -> str:
    """Short tool list for agents that take tools through the system prompt."""

    lines = [
        "Available tools:",
        f"- {query_tool.TOOL_NAME}(query: str)  # SELECT, DESCRIBE, SHOW or INSERT only",
        f"- {speech_tool.TOOL_NAME}(text: str, voice_name: str = '{speech_tool.DEFAULT_VOICE}')  # writes a .wav file",
    ]
    return "\n".join(lines) + "\n"


def run_tool_result(name: str, args: dict[str, Any] | None) -> ToolResult:
    """Validate ``args`` for tool ``name`` and run it."""

    tool_name = (name or "").strip()
    entry = _TOOLS.get(tool_name)
    if entry is None:
        logger.warning("Unknown tool requested: %r", name)
        return ToolResult(
            tool=tool_name,
            status="error",
            kind="unknown_tool",
            message=f"Unknown tool: {tool_name or repr(name)}. Available tools: {', '.join(_TOOLS)}.",
        )

    model, handler = entry
    try:
        parsed = model.model_validate(args or {})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in exc.errors()
        )
        logger.warning("Invalid arguments for %s: %s", tool_name, problems)
        return ToolResult(
            tool=tool_name,
            status="error",
            kind="invalid_arguments",
            message=f"Invalid arguments for {tool_name}: {problems}",
        )

    logger.debug("Running tool %s", tool_name)
    return handler(parsed)


def run_tool(name: str, args: dict[str, Any] | None) -> str:
    """Run a tool by name and return the text result for the agent."""

    return run_tool_result(name, args).message
