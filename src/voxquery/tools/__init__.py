"""The two tools the chat agent can call.

Both return plain text for the model; the ``run_*`` / ``generate_*`` forms
return a :class:`~voxquery.tools.results.ToolResult` instead.
"""

from .query import execute, run_query
from .results import ToolResult
from .speech import generate_audio, synthesize

__all__ = [
    "ToolResult",
    "execute",
    "generate_audio",
    "run_query",
    "synthesize",
]
