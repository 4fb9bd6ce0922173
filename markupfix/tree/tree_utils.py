from __future__ import annotations
import re
from typing import Any, Dict, Iterator, List, Optional, Sequence
from .node import Node
_DIGITS_RE = re.compile('^\\d+$')
_DASH_CHAR_RE = re.compile('-([a-z])')
_IE_HACK_VALUE_RE = re.compile('\\\\9\\\\0|\\\\9|\\\\0')

def to_length(value: Any, unit: str='px') -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return f'{value}{unit}'
    if isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        return f'{value.strip()}{unit}'
    return value

def camel_case(prop: str) -> str:
    return _DASH_CHAR_RE.sub(lambda m: m.group(1).upper(), prop.strip().lower())

def parse_style(style: Any) -> Dict[str, Any]:
    if isinstance(style, dict):
        return dict(style)
    if not isinstance(style, str) or not style.strip():
        return {}
    out: Dict[str, Any] = {}
    for decl in style.split(';'):
        raw_key, sep, raw_value = decl.partition(':')
        key = raw_key.strip()
        value = raw_value.strip()
        if not sep or not key or not value:
            continue
        out[camel_case(key)] = value
    return out

def clean_style(style: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in parse_style(style).items():
        key = key.lstrip('_*')
        if not key:
            continue
        if isinstance(value, str):
            value = _IE_HACK_VALUE_RE.sub('', value).replace('!important', '').strip()
            if not value:
                continue
        out[camel_case(key) if '-' in key else key] = value
    return out

def apply_style(node: Node, derived: Dict[str, Any], *, overwrite: bool=False) -> None:
    merged = parse_style(node.attributes.get('style'))
    for key, value in derived.items():
        if overwrite or key not in merged:
            merged[key] = value
    if merged:
        node.attributes['style'] = merged
    else:
        node.attributes.pop('style', None)

def walk(nodes: Sequence[Node]) -> Iterator[Node]:
    stack: List[Node] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))

def index_of(siblings: Sequence[Node], node: Node) -> Optional[int]:
    for idx, candidate in enumerate(siblings):
        if candidate is node:
            return idx
    return None

def count_tags(nodes: Sequence[Node]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for node in walk(nodes):
        counts[node.tag_name] = counts.get(node.tag_name, 0) + 1
    return counts
