import asyncio
import json

import pytest

from markupfix.agent.history import History
from markupfix.agent.tool_calls import ToolCall, handle_tool_calls
from markupfix.agent.tools import DEFAULT_TOOLS, TOOL_SCHEMAS, convert_jsp_include, filter_elements_tool, normalize_style


def test_convert_absolute_include():
    out = convert_jsp_include({"content": '<jsp:include page="/components/common/header.jsp" id="header" />'})
    assert out == {
        "tagName": "Header",
        "attributes": {"id": "header"},
        "isComponent": True,
        "componentUrl": "@/pages/components/common/Header.jsx",
        "children": [],
    }


def test_convert_relative_include_with_style_and_escaped_quotes():
    out = convert_jsp_include({"content": '<jsp:include page=\\"menu.JSP\\" style=\\"font-size: 12px; color:red\\"/>'})
    assert out["tagName"] == "Menu"
    assert out["componentUrl"] == "./Menu.jsx"
    assert out["attributes"] == {"style": {"fontSize": "12px", "color": "red"}}


def test_convert_root_page():
    assert convert_jsp_include('<jsp:include page="/footer.jsp"/>')["componentUrl"] == "@/pages/Footer.jsx"


def test_convert_missing_page_is_error_payload():
    assert "error" in convert_jsp_include({"content": '<jsp:include flush="true"/>'})


def test_filter_tool_accepts_string_or_dict():
    tree = {"elements": [{"tagName": "body", "children": [{"tagName": "script"}, {"tagName": "div"}]}]}
    from_dict = filter_elements_tool({"unfilteredJson": tree})
    from_text = filter_elements_tool({"unfilteredJson": json.dumps(tree)})
    assert from_dict == from_text
    assert [e["tagName"] for e in from_dict["elements"]] == ["div"]


def test_normalize_style_tool():
    assert normalize_style({"style": "_height:1px; Font-Size: 12px !important"}) == {"height": "1px", "fontSize": "12px"}


def test_registry_and_schemas_agree():
    assert set(DEFAULT_TOOLS) == {s["function"]["name"] for s in TOOL_SCHEMAS}


def test_missing_argument_key_is_rejected():
    with pytest.raises(ValueError, match="missing 'style' argument"):
        normalize_style({"css": "color: red"})
    with pytest.raises(ValueError, match="missing 'content' argument"):
        convert_jsp_include({"page": "/a.jsp"})


def test_filter_tool_accepts_bare_tree_dict():
    tree = {"elements": [{"tagName": "html", "children": [{"tagName": "p"}]}]}
    assert [e["tagName"] for e in filter_elements_tool(tree)["elements"]] == ["p"]


def test_missing_argument_becomes_tool_error():
    calls = [ToolCall("c1", "normalizeStyle", '{"css": "color: red"}')]
    results, history = asyncio.run(handle_tool_calls(calls, History(), DEFAULT_TOOLS))
    assert results[0].error == "missing 'style' argument"
    assert json.loads(history.to_list()[0]["content"]) == {"error": "missing 'style' argument"}
