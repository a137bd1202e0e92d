"""Core package for voxquery.

voxquery provides the tool layer of a chat agent: a guarded SQL query tool
and a text-to-speech tool that writes WAV files, plus the registry an agent
uses to discover and call them.
"""

from .tools import execute, synthesize

__all__ = ["execute", "synthesize"]
