from __future__ import annotations
import json
import logging
import re
from typing import Any, Awaitable, Callable, Optional
import json5
from .errors import MalformedCandidate, ToolArgumentMalformed
from .fence_utils import strip_code_fence
logger = logging.getLogger(__name__)
JsonRepairer = Callable[[str], Awaitable[str]]
_CONTROL_CHARS_RE = re.compile('[\\x00-\\x08\\x0b\\x0c\\x0e-\\x1f]')

def parse_strict(raw: Optional[str]) -> Any:
    text = strip_code_fence(raw)
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedCandidate(f'Candidate is not valid JSON: {exc}', candidate=raw or '') from exc

def parse_lenient(raw: Optional[str]) -> Any:
    """Parse JSON5 (unquoted keys, single quotes, comments, trailing commas, hex)."""
    text = strip_code_fence(raw)
    try:
        value = json5.loads(text)
    except ValueError:
        try:
            value = json5.loads(_CONTROL_CHARS_RE.sub('', text))
        except ValueError as exc:
            raise MalformedCandidate(f'Lenient parse failed: {exc}', candidate=raw or '') from exc
    if not isinstance(value, (dict, list)):
        raise MalformedCandidate(f'Lenient parse produced {type(value).__name__}, expected an object or array', candidate=raw or '')
    return value

async def parse_tool_arguments(tool_name: str, raw: Any, repairer: Optional[JsonRepairer]=None) -> Any:
    if isinstance(raw, (dict, list)):
        return raw
    text = '' if raw is None else str(raw)
    if not text.strip():
        return {}
    try:
        value = parse_lenient(text)
        logger.debug('Lenient parse of %s arguments succeeded', tool_name)
        return value
    except MalformedCandidate as exc:
        first_error = exc
    if repairer is None:
        raise ToolArgumentMalformed(tool_name, text, str(first_error)) from first_error
    logger.warning('Lenient parse of %s arguments failed (%s); delegating repair', tool_name, first_error)
    try:
        repaired = await repairer(text)
        value = parse_strict(repaired)
    except MalformedCandidate as exc:
        raise ToolArgumentMalformed(tool_name, text, f'repair did not produce valid JSON: {exc}') from exc
    logger.info('Delegated repair of %s arguments succeeded', tool_name)
    return value
