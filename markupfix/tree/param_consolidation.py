from __future__ import annotations
import logging
from typing import Dict, Sequence
from .node import PARAMS_TAG, PLACEHOLDER_TAG, Node
logger = logging.getLogger(__name__)
CONTAINER_TAGS = {'object'}
PARAM_TAGS = {'param'}

def collect_params(container: Node) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for child in container.children:
        if child.tag_name.lower() not in PARAM_TAGS:
            continue
        name = child.attributes.get('name')
        if not isinstance(name, str) or not name.strip():
            continue
        value = child.attributes.get('value')
        params[name] = '' if value is None else str(value)
    return params

def consolidate_params(nodes: Sequence[Node]) -> int:
    converted = 0
    for node in nodes:
        if node.tag_name.lower() in CONTAINER_TAGS:
            params = collect_params(node)
            logger.info('Consolidated <%s> with %d param(s) into %s', node.tag_name, len(params), PLACEHOLDER_TAG)
            node.tag_name = PLACEHOLDER_TAG
            node.is_component = True
            node.children = [Node(tag_name=PARAMS_TAG, attributes={'params': params})]
            converted += 1
            continue
        converted += consolidate_params(node.children)
    return converted
