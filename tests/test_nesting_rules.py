import logging

from markupfix.tree.nesting_rules import DEFAULT_RULES, NestingRule, VisitContext, repair_nesting
from markupfix.tree.node import Node, element


def test_form_in_tr_is_wrapped_in_td():
    form = element("form", [element("input")], action="/save")
    row = element("tr", [form])
    applied = repair_nesting([row])
    assert applied == {"form-in-tr": 1}
    assert len(row.children) == 1
    assert row.children[0].tag_name == "td"
    assert row.children[0].children == [form]


def test_form_in_p_moves_before_paragraph():
    form = element("form")
    para = element("p", [element("#text"), form])
    body = element("div", [element("h1"), para])
    applied = repair_nesting([body])
    assert applied == {"form-in-p": 1}
    assert [c.tag_name for c in body.children] == ["h1", "form", "p"]
    assert body.children[1] is form
    assert [c.tag_name for c in para.children] == ["#text"]


def test_form_in_top_level_p_is_left():
    form = element("form")
    para = element("p", [form])
    assert repair_nesting([para]) == {}
    assert para.children == [form]


def test_form_in_table_wraps_table_in_form_copy():
    field = element("input", name="q")
    form = element("form", [field], action="/search", method="post")
    table = element("table", [element("tr", [element("td")]), form])
    container = element("div", [table])
    applied = repair_nesting([container])
    assert applied == {"form-in-table": 1}
    assert len(container.children) == 1
    wrapper = container.children[0]
    assert wrapper.tag_name == "form"
    assert wrapper is not form
    assert wrapper.attributes == {"action": "/search", "method": "post"}
    assert wrapper.children == [table]
    assert [c.tag_name for c in table.children] == ["tr", "input"]
    assert table.children[1] is field
    assert all(c.tag_name != "form" for c in table.children)


def test_top_level_orphan_td():
    root = [Node.from_dict({"tagName": "td"})]
    applied = repair_nesting(root)
    assert applied == {"orphan-td": 1}
    assert [n.to_dict() for n in root] == [
        {
            "tagName": "table",
            "attributes": {},
            "isComponent": False,
            "children": [
                {
                    "tagName": "tr",
                    "attributes": {},
                    "isComponent": False,
                    "children": [{"tagName": "td", "attributes": {}, "children": [], "isComponent": False}],
                }
            ],
        }
    ]


def test_orphan_td_inside_div_keeps_position():
    cell = element("td")
    div = element("div", [element("span"), cell, element("b")])
    repair_nesting([div])
    assert [c.tag_name for c in div.children] == ["span", "table", "b"]
    assert div.children[1].children[0].children == [cell]


def test_cells_in_rows_untouched():
    row = element("tr", [element("td"), element("th")])
    table = element("table", [element("tbody", [row])])
    assert repair_nesting([table]) == {}


def test_nested_forms_all_repaired():
    inner = element("form", name="inner")
    outer = element("form", [element("table", [element("tr", [inner])])], name="outer")
    row = element("tr", [outer])
    applied = repair_nesting([element("table", [element("tbody", [row])])])
    assert applied == {"form-in-tr": 2}
    assert row.children[0].children == [outer]


def test_all_matching_rules_apply_in_order():
    calls = []

    def mark(label):
        def fix(ctx: VisitContext):
            calls.append((label, ctx.node.attributes.get("seen")))
            ctx.node.attributes["seen"] = label
            return ctx

        return fix

    rules = [
        NestingRule("first", lambda c: c.node.tag_name == "span", mark("first")),
        NestingRule("second", lambda c: c.node.attributes.get("seen") == "first", mark("second")),
        NestingRule("never", lambda c: c.node.tag_name == "div", mark("never")),
    ]
    span = element("span")
    assert repair_nesting([span], rules) == {"first": 1, "second": 1}
    assert calls == [("first", None), ("second", "first")]


def test_later_rule_sees_context_from_earlier_fix():
    seen_parents = []

    def record(ctx):
        seen_parents.append(ctx.parent.tag_name)
        return ctx

    rules = list(DEFAULT_RULES[:1]) + [NestingRule("probe", lambda c: c.node.tag_name == "form", record)]
    row = element("tr", [element("form")])
    repair_nesting([row], rules)
    assert seen_parents == ["td"]


def test_each_node_visited_once():
    visits = []

    def record(ctx):
        visits.append(ctx.node.tag_name)
        return None

    rules = [NestingRule("probe", lambda c: True, record)]
    tree = [element("div", [element("p"), element("span", [element("b")])])]
    assert repair_nesting(tree, rules) == {}
    assert visits == ["div", "p", "span", "b"]


def test_applied_rule_is_logged_with_node_kind(caplog):
    caplog.set_level(logging.DEBUG, logger="markupfix.tree.nesting_rules")
    form = Node("form", condition="user != null")
    repair_nesting([element("tr", [form])])
    assert "Rule form-in-tr applied to conditional <form> under <tr>" in caplog.text
