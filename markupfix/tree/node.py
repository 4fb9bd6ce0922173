from __future__ import annotations
import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
TEXT_TAG = '#text'
TBODY_TAG = 'tbody'
PLACEHOLDER_TAG = 'ActiveXPlaceholder'
PARAMS_TAG = '#params'
LOOP_TAG = 'LoopBlock'
CONDITIONAL_TAG = 'ConditionalBlock'
_KNOWN_KEYS = {'tagName', 'attributes', 'children', 'isComponent', 'condition', 'text', 'collection', 'item', 'componentUrl'}

@dataclass
class Node:
    tag_name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List['Node'] = field(default_factory=list)
    is_component: bool = False
    condition: Optional[str] = None
    text: Optional[str] = None
    collection: Optional[str] = None
    item: Optional[str] = None
    component_url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        if self.tag_name == TEXT_TAG:
            return 'text'
        if self.tag_name in {PLACEHOLDER_TAG, PARAMS_TAG}:
            return 'placeholder'
        if self.collection is not None or self.tag_name == LOOP_TAG:
            return 'loop'
        if self.condition is not None or self.tag_name == CONDITIONAL_TAG:
            return 'conditional'
        return 'element'

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Node':
        tag_name = raw.get('tagName')
        attributes = raw.get('attributes')
        attributes = copy.deepcopy(attributes) if isinstance(attributes, dict) else {}
        extra = {k: copy.deepcopy(v) for k, v in raw.items() if k not in _KNOWN_KEYS}
        if tag_name is None and isinstance(raw.get('params'), dict):
            tag_name = PARAMS_TAG
            attributes.setdefault('params', extra.pop('params'))
        raw_children = raw.get('children')
        children = [cls.from_dict(c) for c in raw_children if isinstance(c, dict)] if isinstance(raw_children, list) else []
        return cls(tag_name=str(tag_name or ''), attributes=attributes, children=children, is_component=bool(raw.get('isComponent', False)), condition=_opt_str(raw.get('condition')), text=_opt_str(raw.get('text')), collection=_opt_str(raw.get('collection')), item=_opt_str(raw.get('item')), component_url=_opt_str(raw.get('componentUrl')), extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'tagName': self.tag_name, 'attributes': copy.deepcopy(self.attributes), 'children': [c.to_dict() for c in self.children], 'isComponent': self.is_component}
        for key, value in (('condition', self.condition), ('text', self.text), ('collection', self.collection), ('item', self.item), ('componentUrl', self.component_url)):
            if value is not None:
                out[key] = value
        for key, value in self.extra.items():
            out.setdefault(key, copy.deepcopy(value))
        return out

def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)

def element(tag_name: str, children: Optional[List[Node]]=None, **attributes: Any) -> Node:
    return Node(tag_name=tag_name, attributes=dict(attributes), children=list(children or []))

@dataclass
class Document:
    elements: List[Node] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Document':
        if not isinstance(raw, dict):
            raise TypeError(f'document root must be an object, got {type(raw).__name__}')
        elements = raw.get('elements')
        if not isinstance(elements, list):
            raise TypeError("document root must contain an 'elements' list")
        extra = {k: copy.deepcopy(v) for k, v in raw.items() if k != 'elements'}
        return cls(elements=[Node.from_dict(e) for e in elements if isinstance(e, dict)], extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'elements': [e.to_dict() for e in self.elements]}
        for key, value in self.extra.items():
            out.setdefault(key, copy.deepcopy(value))
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
__all__ = ['CONDITIONAL_TAG', 'Document', 'LOOP_TAG', 'Node', 'PARAMS_TAG', 'PLACEHOLDER_TAG', 'TBODY_TAG', 'TEXT_TAG', 'element']
