import json

from markupfix.tree.node import Document
from markupfix.tree.pipeline import NormalizationPipeline, normalize_document, normalize_json
from markupfix.tree.tree_utils import walk

LEGACY_PAGE = {
    "elements": [
        {
            "tagName": "html",
            "children": [
                {"tagName": "head", "children": [{"tagName": "title"}, {"tagName": "script"}]},
                {
                    "tagName": "body",
                    "attributes": {"bgcolor": "#ffffff"},
                    "children": [
                        {
                            "tagName": "table",
                            "attributes": {"width": "600", "cellpadding": "2", "border": "0"},
                            "children": [
                                {
                                    "tagName": "tr",
                                    "children": [
                                        {"tagName": "td", "attributes": {"align": "right", "style": "color: red"}},
                                        {"tagName": "span"},
                                    ],
                                }
                            ],
                        },
                        {
                            "tagName": "object",
                            "children": [{"tagName": "param", "attributes": {"name": "movie", "value": "a.swf"}}],
                        },
                        {"tagName": "div", "condition": "session.getAttribute('role')=='admin'", "children": []},
                    ],
                },
            ],
        }
    ]
}


def test_full_pipeline_on_legacy_page():
    pipeline = NormalizationPipeline()
    doc = pipeline.run(Document.from_dict(json.loads(json.dumps(LEGACY_PAGE))))
    assert [n.tag_name for n in doc.elements] == ["table", "ActiveXPlaceholder", "div"]
    table = doc.elements[0]
    assert table.attributes == {"style": {"width": "600px", "border": "none"}}
    tbody = table.children[0]
    assert tbody.tag_name == "tbody"
    row = tbody.children[0]
    cell, hidden = row.children
    assert cell.attributes["style"] == {"color": "red", "textAlign": "right", "padding": "2px"}
    assert hidden.attributes["style"] == {"display": "none"}
    assert hidden.children[0].tag_name == "span"
    assert doc.elements[1].children[0].attributes == {"params": {"movie": "a.swf"}}
    assert doc.elements[2].condition == "sessionStorage.getItem('role')=='admin'"
    assert [r.name for r in pipeline.reports] == [
        "attribute_lowering",
        "param_consolidation",
        "expression_rewrite",
        "table_repair",
        "nesting_repair",
        "filter_flatten",
    ]


def test_pipeline_is_idempotent():
    first = normalize_document(json.loads(json.dumps(LEGACY_PAGE))).to_dict()
    second = normalize_document(json.loads(json.dumps(first))).to_dict()
    assert second == first


def test_no_filtered_tags_remain():
    doc = normalize_document(json.loads(json.dumps(LEGACY_PAGE)))
    tags = {n.tag_name for n in walk(doc.elements)}
    assert not tags & {"meta", "title", "link", "script", "noscript", "style", "html", "head", "body"}


def test_table_repair_runs_before_nesting_repair():
    raw = {"elements": [{"tagName": "table", "children": [{"tagName": "tr", "children": [{"tagName": "form"}]}]}]}
    doc = normalize_document(raw)
    cell = doc.elements[0].children[0].children[0].children[0]
    assert cell.tag_name == "td"
    assert cell.attributes == {"style": {"display": "none"}}
    assert cell.children[0].tag_name == "form"


def test_normalize_json_returns_formatted_text():
    text = normalize_json('{"elements": [{"tagName": "td", "attributes": {"width": "5"}}], "page": "login"}')
    data = json.loads(text)
    assert data["page"] == "login"
    assert data["elements"][0]["tagName"] == "table"
    assert data["elements"][0]["children"][0]["children"][0]["attributes"] == {"style": {"width": "5px"}}
    assert "\n  " in text


def test_orphan_td_table_gains_tbody_on_second_run():
    # nesting repair builds the table after table repair has run, so only a second pass adds the tbody
    first = normalize_document({"elements": [{"tagName": "td"}]}).to_dict()
    assert [c["tagName"] for c in first["elements"][0]["children"]] == ["tr"]
    second = normalize_document(json.loads(json.dumps(first))).to_dict()
    tbody = second["elements"][0]["children"][0]
    assert tbody["tagName"] == "tbody"
    assert tbody["children"][0]["tagName"] == "tr"
    assert normalize_document(json.loads(json.dumps(second))).to_dict() == second
