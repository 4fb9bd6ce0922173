from __future__ import annotations
import inspect
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from .errors import MalformedCandidate, MarkupFixError, UnknownOperation
from .fence_utils import split_tool_call_blocks
from .history import History
from .lenient_json import JsonRepairer, parse_strict, parse_tool_arguments
from .task_executor import run_with_concurrency_limit
logger = logging.getLogger(__name__)
Tool = Callable[[Any], Any]
ToolCallNormalizer = Callable[[str], Awaitable[str]]
_FUNCTION_RE = re.compile('<function\\s*=\\s*["\']?([^>\\s"\']+)["\']?\\s*>', re.IGNORECASE)
_PARAMETER_RE = re.compile('<parameter\\s*=\\s*["\']?([^>\\s"\']+)["\']?\\s*>([\\s\\S]*?)</parameter>', re.IGNORECASE)

@dataclass
class ToolCall:
    id: str
    name: str
    arguments: str = ''

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'ToolCall':
        function = raw.get('function') or {}
        arguments = function.get('arguments', '')
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments, ensure_ascii=False)
        return cls(id=str(raw.get('id') or ''), name=str(function.get('name') or ''), arguments=arguments)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'type': 'function', 'function': {'name': self.name, 'arguments': self.arguments}}

@dataclass
class ToolResult:
    tool_name: str
    tool_call_id: str
    result: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def payload(self) -> Any:
        return {'error': self.error} if self.error is not None else self.result

def _parse_block(block: str, call_id: str) -> Optional[ToolCall]:
    name_match = _FUNCTION_RE.search(block)
    if not name_match:
        return None
    param_match = _PARAMETER_RE.search(block)
    arguments = {param_match.group(1).strip(): param_match.group(2).strip()} if param_match else {}
    return ToolCall(id=call_id, name=name_match.group(1).strip(), arguments=json.dumps(arguments, ensure_ascii=False))

def normalize_tool_calls(content: Optional[str]) -> List[ToolCall]:
    """Extract ``<tool_call>`` blocks written as text into structured calls."""
    calls: List[ToolCall] = []
    stamp = int(time.time() * 1000)
    for i, block in enumerate(split_tool_call_blocks(content)):
        call = _parse_block(block, f'call_{stamp}_{i}')
        if call is None:
            logger.warning('Skipping tool_call block %d without a function name: %r', i + 1, block[:200])
            continue
        calls.append(call)
    logger.debug('Normalized %d tool call(s) from content', len(calls))
    return calls

async def _calls_from_normalizer(block: str, call_id: str, normalizer: ToolCallNormalizer, repairer: Optional[JsonRepairer]) -> List[ToolCall]:
    raw = await normalizer(block)
    try:
        value = parse_strict(raw)
    except MalformedCandidate:
        if repairer is None:
            raise
        logger.warning('Normalized tool_call is not valid JSON; delegating repair')
        value = parse_strict(await repairer(raw))
    entries = value if isinstance(value, list) else [value]
    calls: List[ToolCall] = []
    for j, entry in enumerate(entries):
        if not isinstance(entry, dict):
            continue
        call = ToolCall.from_dict(entry)
        if not call.name:
            continue
        if not call.id:
            call.id = f'{call_id}_{j}'
        calls.append(call)
    return calls

async def resolve_tool_calls(content: Optional[str], normalizer: Optional[ToolCallNormalizer]=None, repairer: Optional[JsonRepairer]=None) -> List[ToolCall]:
    """Like :func:`normalize_tool_calls`, but blocks the pattern cannot read are rebuilt by ``normalizer``."""
    calls: List[ToolCall] = []
    stamp = int(time.time() * 1000)
    for i, block in enumerate(split_tool_call_blocks(content)):
        call_id = f'call_{stamp}_{i}'
        call = _parse_block(block, call_id)
        if call is not None:
            calls.append(call)
            continue
        if normalizer is None:
            logger.warning('Skipping tool_call block %d without a function name: %r', i + 1, block[:200])
            continue
        try:
            rebuilt = await _calls_from_normalizer(block, call_id, normalizer, repairer)
        except MarkupFixError as exc:
            logger.error('Could not normalize tool_call block %d: %s', i + 1, exc)
            continue
        logger.info('Normalizer rebuilt tool_call block %d into %d call(s)', i + 1, len(rebuilt))
        calls.extend(rebuilt)
    logger.debug('Resolved %d tool call(s) from content', len(calls))
    return calls

async def _invoke(call: ToolCall, tools: Mapping[str, Tool], repairer: Optional[JsonRepairer]) -> Any:
    tool = tools.get(call.name)
    if tool is None:
        raise UnknownOperation(call.name)
    logger.debug('Raw arguments for %s: %s', call.name, call.arguments)
    args = await parse_tool_arguments(call.name, call.arguments, repairer)
    result = tool(args)
    if inspect.isawaitable(result):
        result = await result
    return result

async def handle_tool_calls(calls: Sequence[ToolCall], history: History, tools: Mapping[str, Tool], *, repairer: Optional[JsonRepairer]=None, limit: int=2) -> Tuple[List[ToolResult], History]:
    if not calls:
        return ([], history)
    logger.info('Running %d tool call(s) with concurrency %d', len(calls), limit)
    outcomes = await run_with_concurrency_limit([(call.id, lambda call=call: _invoke(call, tools, repairer)) for call in calls], limit)
    results: List[ToolResult] = []
    for call, outcome in zip(calls, outcomes):
        if outcome.ok:
            result = ToolResult(tool_name=call.name, tool_call_id=call.id, result=outcome.result)
        else:
            logger.error('Tool %s (%s) failed: %s', call.name, call.id, outcome.error)
            result = ToolResult(tool_name=call.name, tool_call_id=call.id, error=str(outcome.error))
        results.append(result)
        history = history.tool(call.id, result.payload(), name=call.name)
    return (results, history)
