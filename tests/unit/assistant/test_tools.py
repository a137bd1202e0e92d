from __future__ import annotations

import voxquery.assistant.tools as registry
from voxquery.tools.results import ToolResult


def test_openai_tools_describe_both_tools():
    specs = registry.openai_tools()
    names = [spec["function"]["name"] for spec in specs]
    assert names == ["run_mysql_query", "generate_and_save_audio"]

    query_spec, audio_spec = (spec["function"] for spec in specs)
    assert query_spec["parameters"]["required"] == ["query"]
    assert audio_spec["parameters"]["required"] == ["text"]
    assert set(audio_spec["parameters"]["properties"]) == {"text", "voice_name"}
    assert '"Charon", "Kore", or "Puck"' in audio_spec["description"]


def test_tool_prompt_lists_tools():
    prompt = registry.tool_prompt()
    assert prompt.startswith("Available tools:")
    assert "run_mysql_query(query: str)" in prompt
    assert "generate_and_save_audio(text: str, voice_name: str = 'Charon')" in prompt


def test_run_tool_dispatches_query(monkeypatch):
    seen: list[str] = []

    def fake_run_query(statement: str) -> ToolResult:
        seen.append(statement)
        return ToolResult(tool="run_mysql_query", status="ok", message="Found 1 record(s):\nRow 1: {a: 1}")

    monkeypatch.setattr(registry.query_tool, "run_query", fake_run_query)

    assert registry.run_tool("run_mysql_query", {"query": "SELECT 1 AS a"}) == "Found 1 record(s):\nRow 1: {a: 1}"
    assert seen == ["SELECT 1 AS a"]


def test_run_tool_dispatches_audio_with_optional_voice(monkeypatch):
    calls: list[tuple[str, str | None]] = []

    def fake_generate_audio(text: str, voice_name: str | None) -> ToolResult:
        calls.append((text, voice_name))
        return ToolResult(tool="generate_and_save_audio", status="ok", message="Audio successfully saved to: x.wav")

    monkeypatch.setattr(registry.speech_tool, "generate_audio", fake_generate_audio)

    registry.run_tool("generate_and_save_audio", {"text": "hello"})
    registry.run_tool("generate_and_save_audio", {"text": "hi", "voice_name": "Kore", "extra": 1})

    assert calls == [("hello", None), ("hi", "Kore")]


def test_run_tool_reports_unknown_tool():
    result = registry.run_tool_result("drop_everything", {})
    assert result.status == "error"
    assert result.kind == "unknown_tool"
    assert result.message.startswith("Unknown tool: drop_everything.")
    assert "run_mysql_query" in result.message


def test_run_tool_reports_invalid_arguments(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("tool should not run")

    monkeypatch.setattr(registry.query_tool, "run_query", fail)

    result = registry.run_tool_result("run_mysql_query", {"sql": "SELECT 1"})
    assert result.kind == "invalid_arguments"
    assert result.message.startswith("Invalid arguments for run_mysql_query: query:")

    message = registry.run_tool("run_mysql_query", None)
    assert message.startswith("Invalid arguments for run_mysql_query")


def test_tool_result_to_dict():
    result = ToolResult(tool="t", status="empty", message="m", kind="no_results")
    assert result.to_dict() == {"tool": "t", "status": "empty", "ok": True, "message": "m", "kind": "no_results"}
