"""Tool registry used by the external chat agent.

The agent loop itself (model choice, planning, history) lives outside this
package; it only needs :func:`openai_tools` to advertise the tools and
:func:`run_tool` to call them.
"""

from .tools import openai_tools, run_tool, run_tool_result, tool_prompt

__all__ = ["openai_tools", "run_tool", "run_tool_result", "tool_prompt"]
