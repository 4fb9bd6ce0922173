from __future__ import annotations
import json
import logging
import posixpath
import re
from typing import Any, Callable, Dict, List
from ..tree.filter_flatten import filter_and_flatten
from ..tree.node import Document
from ..tree.tree_utils import clean_style, parse_style
logger = logging.getLogger(__name__)
_ATTR_RE = re.compile('([\\w-]+)="([^"]*)"')
_JSP_SUFFIX_RE = re.compile('\\.jsp$', re.IGNORECASE)

def _argument(args: Any, key: str) -> Any:
    if isinstance(args, dict):
        if key not in args:
            raise ValueError(f"missing '{key}' argument")
        return args[key]
    return args

def filter_elements_tool(args: Any) -> Dict[str, Any]:
    if isinstance(args, dict) and 'unfilteredJson' not in args and 'elements' in args:
        payload = args
    else:
        payload = _argument(args, 'unfilteredJson')
    if isinstance(payload, str):
        payload = json.loads(payload)
    if isinstance(payload, list):
        payload = {'elements': payload}
    document = Document.from_dict(payload)
    document.elements = filter_and_flatten(document.elements)
    logger.debug('Filtered tree down to %d top-level element(s)', len(document.elements))
    return document.to_dict()

def convert_jsp_include(args: Any) -> Dict[str, Any]:
    """Turn a ``<jsp:include page=...>`` snippet into a component node."""
    snippet = str(_argument(args, 'content') or '').replace('\\"', '"')
    attributes: Dict[str, Any] = {}
    page = None
    for name, value in _ATTR_RE.findall(snippet):
        if name == 'page':
            page = value
        elif name == 'style':
            attributes['style'] = parse_style(value)
        else:
            attributes[name] = value
    if not page:
        return {'error': 'jsp:include is missing the page attribute'}
    directory, file_name = posixpath.split(page)
    stem = _JSP_SUFFIX_RE.sub('', file_name)
    component = stem[:1].upper() + stem[1:]
    if page.startswith('/'):
        component_url = f"@/pages{directory.rstrip('/')}/{component}.jsx"
    else:
        component_url = f'./{component}.jsx'
    return {'tagName': component, 'attributes': attributes, 'isComponent': True, 'componentUrl': component_url, 'children': []}

def normalize_style(args: Any) -> Dict[str, Any]:
    return clean_style(_argument(args, 'style'))
DEFAULT_TOOLS: Dict[str, Callable[[Any], Any]] = {'filterAndGenerateReactComponent': filter_elements_tool, 'convertJspInclude': convert_jsp_include, 'normalizeStyle': normalize_style}

def _schema(name: str, description: str, param: str, param_description: str) -> Dict[str, Any]:
    return {'type': 'function', 'function': {'name': name, 'description': description, 'parameters': {'type': 'object', 'properties': {param: {'type': 'string', 'description': param_description}}, 'required': [param]}}}
TOOL_SCHEMAS: List[Dict[str, Any]] = [_schema('filterAndGenerateReactComponent', 'Remove non-rendering tags (meta, title, link, script, noscript, style) and flatten html/head/body wrappers.', 'unfilteredJson', 'JSON text of the form {"elements": [...]}.'), _schema('convertJspInclude', 'Convert a <jsp:include> tag into a component node with a componentUrl.', 'content', 'The complete <jsp:include .../> snippet.'), _schema('normalizeStyle', 'Parse an inline CSS declaration string into a camelCase style object.', 'style', 'CSS declarations, e.g. "font-size: 12px; color: red".')]
