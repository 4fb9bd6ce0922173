from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
from .node import Node
from .tree_utils import apply_style, to_length
logger = logging.getLogger(__name__)
StyleHandler = Callable[[Any], Dict[str, Any]]

@dataclass(frozen=True)
class StyleMapping:
    prop: Optional[str] = None
    transform: Optional[Callable[[Any], Any]] = None
    handler: Optional[StyleHandler] = None

    def derive(self, value: Any) -> Dict[str, Any]:
        if self.handler is not None:
            return self.handler(value)
        if self.prop is None:
            return {}
        return {self.prop: self.transform(value) if self.transform else value}

def _border(value: Any) -> str:
    if str(value).strip() == '0':
        return 'none'
    return f'{to_length(value)} solid black'

def _cellspacing(value: Any) -> Dict[str, Any]:
    return {'borderSpacing': to_length(value), 'borderCollapse': 'separate'}
LEGACY_STYLE_ATTRIBUTES: Dict[str, StyleMapping] = {'align': StyleMapping('textAlign'), 'valign': StyleMapping('verticalAlign'), 'bgcolor': StyleMapping('backgroundColor'), 'color': StyleMapping('color'), 'face': StyleMapping('fontFamily'), 'width': StyleMapping('width', to_length), 'height': StyleMapping('height', to_length), 'size': StyleMapping('fontSize', to_length), 'background': StyleMapping('backgroundImage', lambda v: f'url({v})'), 'border': StyleMapping('border', _border), 'nowrap': StyleMapping('whiteSpace', lambda _v: 'nowrap'), 'cellspacing': StyleMapping(handler=_cellspacing), 'cellpadding': StyleMapping('padding', to_length)}
_TABLE_DEFERRED = {'cellpadding'}

def lower_node_attributes(node: Node) -> List[str]:
    lowered: List[str] = []
    derived: Dict[str, Any] = {}
    for name, mapping in LEGACY_STYLE_ATTRIBUTES.items():
        if name not in node.attributes:
            continue
        if node.tag_name == 'table' and name in _TABLE_DEFERRED:
            continue
        value = node.attributes.pop(name)
        for prop, prop_value in mapping.derive(value).items():
            derived.setdefault(prop, prop_value)
        lowered.append(name)
    if lowered or 'style' in node.attributes:
        apply_style(node, derived)
    return lowered

def lower_attributes(nodes: Sequence[Node]) -> int:
    total = 0
    for node in nodes:
        lowered = lower_node_attributes(node)
        if lowered:
            logger.debug('Lowered %s on <%s> into style', ','.join(lowered), node.tag_name)
            total += len(lowered)
        total += lower_attributes(node.children)
    return total
