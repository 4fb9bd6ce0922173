import json

from markupfix.agent.history import History


def test_history_is_immutable_value():
    base = History.start("system")
    longer = base.user("hi").assistant("hello")
    assert len(base) == 1
    assert len(longer) == 3
    assert [m["role"] for m in longer.to_list()] == ["system", "user", "assistant"]


def test_start_without_prompt_is_empty():
    assert len(History.start()) == 0
    assert History().last is None


def test_assistant_tool_calls_only_when_present():
    plain = History().assistant(None)
    assert plain.last == {"role": "assistant", "content": ""}
    calls = [{"id": "c1", "type": "function", "function": {"name": "f", "arguments": "{}"}}]
    with_calls = History().assistant("", calls)
    assert with_calls.last["tool_calls"] == calls
    calls[0]["id"] = "changed"
    assert with_calls.last["tool_calls"][0]["id"] == "c1"


def test_tool_message_serializes_payload():
    history = History().tool("c1", {"error": "boom"}, name="f").tool("c2", "raw")
    first, second = history.to_list()
    assert first == {"role": "tool", "content": json.dumps({"error": "boom"}), "tool_call_id": "c1", "name": "f"}
    assert second == {"role": "tool", "content": "raw", "tool_call_id": "c2"}


def test_to_list_returns_copies():
    history = History().user("x")
    messages = history.to_list()
    messages[0]["content"] = "y"
    assert history.last["content"] == "x"
