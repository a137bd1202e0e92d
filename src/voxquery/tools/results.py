from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

ResultStatus = Literal["ok", "empty", "error"]


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a single tool invocation.

    ``message`` is the text handed back to the calling agent. ``status`` and
    ``kind`` let programmatic callers tell an empty result apart from a
    failure without parsing that text.
    """

    tool: str
    status: ResultStatus
    message: str
    kind: str | None = None
    data: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status != "error"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "tool": self.tool,
            "status": self.status,
            "ok": self.ok,
            "message": self.message,
        }
        if self.kind is not None:
            payload["kind"] = self.kind
        if self.data:
            payload["data"] = self.data
        return payload
