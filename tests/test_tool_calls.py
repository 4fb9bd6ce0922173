import asyncio
import json

from markupfix.agent.history import History
from markupfix.agent.tool_calls import ToolCall, handle_tool_calls, normalize_tool_calls, resolve_tool_calls


def test_tool_call_from_openai_shape():
    call = ToolCall.from_dict({"id": "c1", "type": "function", "function": {"name": "normalizeStyle", "arguments": {"style": "a:b"}}})
    assert call.name == "normalizeStyle"
    assert json.loads(call.arguments) == {"style": "a:b"}
    assert ToolCall.from_dict(call.to_dict()) == call


def test_normalize_tool_calls_from_text():
    content = (
        "I will call tools.\n"
        "<tool_call>\n<function=convertJspInclude>\n<parameter=content>\n<jsp:include page=\"/a/b.jsp\"/>\n</parameter>\n</function>\n</tool_call>\n"
        "<tool_call><function='normalizeStyle'></function></tool_call>\n"
        "<tool_call>no function here</tool_call>"
    )
    calls = normalize_tool_calls(content)
    assert [c.name for c in calls] == ["convertJspInclude", "normalizeStyle"]
    assert json.loads(calls[0].arguments) == {"content": '<jsp:include page="/a/b.jsp"/>'}
    assert json.loads(calls[1].arguments) == {}
    assert calls[0].id.startswith("call_") and calls[0].id.endswith("_0")
    assert calls[1].id.endswith("_1")


def test_normalize_without_tool_call_markup():
    assert normalize_tool_calls("{\"elements\": []}") == []
    assert normalize_tool_calls(None) == []


def test_resolve_sends_only_unreadable_blocks_to_normalizer():
    content = (
        "<tool_call><function=normalizeStyle><parameter=style>a:b</parameter></function></tool_call>\n"
        "<tool_call>call convertJspInclude please</tool_call>"
    )
    seen = []

    async def normalizer(block):
        seen.append(block)
        return '```json\n[{"type": "function", "function": {"name": "convertJspInclude", "arguments": "{}"}}]\n```'

    calls = asyncio.run(resolve_tool_calls(content, normalizer))
    assert [b.strip() for b in seen] == ["<tool_call>call convertJspInclude please</tool_call>"]
    assert [c.name for c in calls] == ["normalizeStyle", "convertJspInclude"]
    assert calls[1].id.startswith("call_") and calls[1].id.endswith("_1_0")


def test_resolve_repairs_normalizer_reply_once():
    repaired = []

    async def normalizer(block):
        return "[{function: {name: 'echo'}}"

    async def repairer(text):
        repaired.append(text)
        return '[{"id": "r1", "function": {"name": "echo", "arguments": "{}"}}]'

    calls = asyncio.run(resolve_tool_calls("<tool_call>echo</tool_call>", normalizer, repairer))
    assert [(c.id, c.name) for c in calls] == [("r1", "echo")]
    assert repaired == ["[{function: {name: 'echo'}}"]


def test_resolve_logs_and_skips_block_when_normalizer_fails():
    async def normalizer(block):
        return "not json"

    calls = asyncio.run(resolve_tool_calls("<tool_call>x</tool_call><tool_call><function=ok></function></tool_call>", normalizer))
    assert [c.name for c in calls] == ["ok"]
    assert asyncio.run(resolve_tool_calls("<tool_call>x</tool_call>")) == []


def test_handle_tool_calls_isolates_failures_and_keeps_order():
    async def slow_echo(args):
        await asyncio.sleep(0.01)
        return {"echo": args["value"]}

    def boom(args):
        raise RuntimeError("tool exploded")

    tools = {"echo": slow_echo, "boom": boom}
    calls = [
        ToolCall("c1", "echo", '{"value": 1}'),
        ToolCall("c2", "missing", "{}"),
        ToolCall("c3", "boom", "{}"),
        ToolCall("c4", "echo", "{value: 4,}"),
        ToolCall("c5", "echo", "{value: ["),
    ]
    results, history = asyncio.run(handle_tool_calls(calls, History.start("sys"), tools))
    assert [r.tool_call_id for r in results] == ["c1", "c2", "c3", "c4", "c5"]
    assert results[0].result == {"echo": 1}
    assert results[3].result == {"echo": 4}
    assert results[1].error == "Tool 'missing' does not exist."
    assert results[2].error == "tool exploded"
    assert "could not be parsed" in results[4].error
    messages = history.to_list()[1:]
    assert [m["tool_call_id"] for m in messages] == ["c1", "c2", "c3", "c4", "c5"]
    assert json.loads(messages[0]["content"]) == {"echo": 1}
    assert json.loads(messages[2]["content"]) == {"error": "tool exploded"}


def test_handle_tool_calls_uses_repairer_for_bad_arguments():
    repaired = []

    async def repairer(text):
        repaired.append(text)
        return '{"value": "fixed"}'

    calls = [ToolCall("c1", "echo", "{value: [")]
    results, _ = asyncio.run(handle_tool_calls(calls, History(), {"echo": lambda args: args["value"]}, repairer=repairer))
    assert results[0].result == "fixed"
    assert repaired == ["{value: ["]


def test_no_calls_returns_history_unchanged():
    history = History.start("sys")
    results, after = asyncio.run(handle_tool_calls([], history, {}))
    assert results == []
    assert after is history
