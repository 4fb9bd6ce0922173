from __future__ import annotations
import logging
import re
from typing import Sequence
from .node import Node
logger = logging.getLogger(__name__)
_SESSION_GET_RE = re.compile('(?<![\\w.$])session\\.getAttribute\\(\\s*([^()]*?)\\s*\\)')

def _unquote(arg: str) -> str:
    if len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in {'"', "'"}:
        return arg[1:-1]
    return arg

def _replace(match: re.Match) -> str:
    return f"sessionStorage.getItem('{_unquote(match.group(1))}')"

def rewrite_expression(expr: str) -> str:
    return _SESSION_GET_RE.sub(_replace, expr)

def rewrite_conditions(nodes: Sequence[Node]) -> int:
    rewritten = 0
    for node in nodes:
        if isinstance(node.condition, str) and 'session.getAttribute(' in node.condition:
            updated, count = _SESSION_GET_RE.subn(_replace, node.condition)
            if count:
                logger.debug('Rewrote %d session accessor(s) in condition %r', count, node.condition)
                node.condition = updated
                rewritten += count
        rewritten += rewrite_conditions(node.children)
    return rewritten
