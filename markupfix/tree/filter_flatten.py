from __future__ import annotations
from dataclasses import replace
from typing import List, Sequence
from .node import Node
REMOVABLE_TAGS = frozenset({'meta', 'title', 'link', 'script', 'noscript', 'style'})
WRAPPER_TAGS = frozenset({'html', 'head', 'body'})

def filter_and_flatten(nodes: Sequence[Node]) -> List[Node]:
    out: List[Node] = []
    for node in nodes:
        tag = node.tag_name.lower()
        if tag in REMOVABLE_TAGS:
            continue
        if tag in WRAPPER_TAGS:
            out.extend(filter_and_flatten(node.children))
            continue
        if node.children:
            out.append(replace(node, children=filter_and_flatten(node.children)))
        else:
            out.append(node)
    return out
