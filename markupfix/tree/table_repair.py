from __future__ import annotations
import logging
from typing import Sequence
from .node import TBODY_TAG, Node
from .tree_utils import apply_style, to_length, walk
logger = logging.getLogger(__name__)
CELL_TAGS = {'td', 'th'}

def wrap_in_tbody(table: Node) -> bool:
    # first child only: a leading tbody is trusted even if stray rows follow it
    if not table.children or table.children[0].tag_name == TBODY_TAG:
        return False
    table.children = [Node(tag_name=TBODY_TAG, children=table.children)]
    return True

def apply_cellpadding(table: Node) -> int:
    if 'cellpadding' not in table.attributes:
        return 0
    padding = to_length(table.attributes.pop('cellpadding'))
    cells = 0
    for node in walk(table.children):
        if node.tag_name in CELL_TAGS:
            apply_style(node, {'padding': padding}, overwrite=True)
            cells += 1
    return cells

def wrap_row_children(row: Node) -> int:
    wrapped = 0
    children = []
    for child in row.children:
        if child.tag_name in CELL_TAGS:
            children.append(child)
            continue
        children.append(Node(tag_name='td', attributes={'style': {'display': 'none'}}, children=[child]))
        wrapped += 1
    row.children = children
    return wrapped

def repair_tables(nodes: Sequence[Node]) -> int:
    repairs = 0
    for node in nodes:
        if node.tag_name == 'table':
            if wrap_in_tbody(node):
                logger.info('Wrapped %d <table> child(ren) in a synthetic <tbody>', len(node.children[0].children))
                repairs += 1
            cells = apply_cellpadding(node)
            if cells:
                logger.debug('Applied cellpadding to %d cell(s)', cells)
                repairs += 1
        elif node.tag_name == 'tr':
            wrapped = wrap_row_children(node)
            if wrapped:
                logger.info('Wrapped %d non-cell <tr> child(ren) in hidden <td>', wrapped)
                repairs += wrapped
        repairs += repair_tables(node.children)
    return repairs
