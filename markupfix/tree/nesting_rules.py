from __future__ import annotations
import copy
import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from .node import Node
from .tree_utils import index_of
logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class VisitContext:
    node: Node
    ancestors: Tuple[Node, ...]
    root: List[Node]

    @property
    def parent(self) -> Optional[Node]:
        return self.ancestors[-1] if self.ancestors else None

    @property
    def grandparent(self) -> Optional[Node]:
        return self.ancestors[-2] if len(self.ancestors) >= 2 else None

    def siblings(self) -> List[Node]:
        parent = self.parent
        return parent.children if parent is not None else self.root

    def moved(self, ancestors: Tuple[Node, ...]) -> 'VisitContext':
        return replace(self, ancestors=ancestors)
RuleMatch = Callable[[VisitContext], bool]
RuleFix = Callable[[VisitContext], Optional[VisitContext]]

@dataclass(frozen=True)
class NestingRule:
    """One illegal parent/child combination and its repair.

    ``fix`` returns the node's context after the repair, or ``None`` when the
    tree no longer has the shape the rule expects.
    """
    name: str
    matches: RuleMatch
    fix: RuleFix

def _tag_of(node: Optional[Node]) -> Optional[str]:
    return node.tag_name if node is not None else None

def _wrap_form_in_td(ctx: VisitContext) -> Optional[VisitContext]:
    siblings = ctx.siblings()
    idx = index_of(siblings, ctx.node)
    if idx is None:
        return None
    cell = Node(tag_name='td', children=[ctx.node])
    siblings[idx] = cell
    return ctx.moved(ctx.ancestors + (cell,))

def _hoist_form_before_p(ctx: VisitContext) -> Optional[VisitContext]:
    parent, grandparent = (ctx.parent, ctx.grandparent)
    if parent is None or grandparent is None:
        return None
    p_idx = index_of(grandparent.children, parent)
    f_idx = index_of(parent.children, ctx.node)
    if p_idx is None or f_idx is None:
        return None
    del parent.children[f_idx]
    grandparent.children.insert(p_idx, ctx.node)
    return ctx.moved(ctx.ancestors[:-1])

def _lift_table_into_form(ctx: VisitContext) -> Optional[VisitContext]:
    table, grandparent = (ctx.parent, ctx.grandparent)
    if table is None or grandparent is None:
        return None
    t_idx = index_of(grandparent.children, table)
    f_idx = index_of(table.children, ctx.node)
    if t_idx is None or f_idx is None:
        return None
    relocated = replace(ctx.node, attributes=copy.deepcopy(ctx.node.attributes), children=[table], extra=copy.deepcopy(ctx.node.extra))
    table.children[f_idx:f_idx + 1] = ctx.node.children
    ctx.node.children = []
    grandparent.children[t_idx] = relocated
    return ctx.moved(ctx.ancestors[:-1] + (relocated, table))

def _wrap_orphan_td(ctx: VisitContext) -> Optional[VisitContext]:
    siblings = ctx.siblings()
    idx = index_of(siblings, ctx.node)
    if idx is None:
        return None
    row = Node(tag_name='tr', children=[ctx.node])
    table = Node(tag_name='table', children=[row])
    siblings[idx] = table
    return ctx.moved(ctx.ancestors + (table, row))
DEFAULT_RULES: Tuple[NestingRule, ...] = (NestingRule('form-in-tr', lambda c: c.node.tag_name == 'form' and _tag_of(c.parent) == 'tr', _wrap_form_in_td), NestingRule('form-in-p', lambda c: c.node.tag_name == 'form' and _tag_of(c.parent) == 'p', _hoist_form_before_p), NestingRule('form-in-table', lambda c: c.node.tag_name == 'form' and _tag_of(c.parent) == 'table', _lift_table_into_form), NestingRule('orphan-td', lambda c: c.node.tag_name == 'td' and _tag_of(c.parent) != 'tr', _wrap_orphan_td))

class NestingRepairer:

    def __init__(self, rules: Sequence[NestingRule]=DEFAULT_RULES) -> None:
        self.rules = tuple(rules)
        self.applied: Counter[str] = Counter()
        self._seen: Dict[int, Node] = {}

    def repair(self, root: List[Node]) -> List[Node]:
        self.applied = Counter()
        self._seen = {}
        self._visit(root, (), root)
        self._seen = {}
        return root

    def _visit(self, siblings: List[Node], ancestors: Tuple[Node, ...], root: List[Node]) -> None:
        owner = ancestors[-1] if ancestors else None
        index = 0
        while index < len(siblings):
            node = siblings[index]
            if id(node) in self._seen:
                index += 1
                continue
            self._seen[id(node)] = node
            ctx = VisitContext(node=node, ancestors=ancestors, root=root)
            for rule in self.rules:
                if not rule.matches(ctx):
                    continue
                updated = rule.fix(ctx)
                if updated is None:
                    logger.debug('Rule %s matched <%s> but the tree shape changed; skipped', rule.name, node.tag_name)
                    continue
                logger.debug('Rule %s applied to %s <%s> under <%s>', rule.name, node.kind, node.tag_name, _tag_of(ctx.parent) or '#root')
                self.applied[rule.name] += 1
                ctx = updated
            if ctx.parent is owner:
                ancestors = ctx.ancestors
            self._visit(node.children, ctx.ancestors + (node,), root)
            # no index bump: whatever now sits at this index (a wrapper, spliced children) is visited next

def repair_nesting(nodes: List[Node], rules: Sequence[NestingRule]=DEFAULT_RULES) -> Dict[str, int]:
    repairer = NestingRepairer(rules)
    repairer.repair(nodes)
    if repairer.applied:
        logger.info('Nesting repairs: %s', dict(repairer.applied))
    return dict(repairer.applied)
