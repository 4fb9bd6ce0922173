from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional
from ..tree.pipeline import NormalizationPipeline
from .history import History
from .regenerate import CORRECTIVE_INSTRUCTION, CandidateGenerator, generate_and_validate
from .tool_calls import ToolCall, ToolResult, handle_tool_calls, resolve_tool_calls
from .tools import DEFAULT_TOOLS, TOOL_SCHEMAS
logger = logging.getLogger(__name__)
SYSTEM_PROMPT = 'You are a code assistant that converts legacy JSP/HTML markup into a JSON element tree.\nRules:\n- Convert the markup yourself whenever you can.\n- Call convertJspInclude for every <jsp:include> tag, one complete tag per call.\n- Call normalizeStyle whenever a style attribute is a string or uses hacks such as _/* prefixes or missing units, and use its result as the style object.\n- Call filterAndGenerateReactComponent to drop non-rendering tags from a finished tree.\n- Pass only the minimal snippet to each tool.\n- The final answer must be a single JSON object of the form {"elements": [...]} with no other text.'
INTEGRATE_INSTRUCTION = 'The tool calls are complete. Integrate their results and output only the JSON object.'

@dataclass
class ConversionConfig:
    max_attempts: int = 3
    tool_concurrency: int = 2
    system_prompt: str = SYSTEM_PROMPT
    corrective_instruction: str = CORRECTIVE_INSTRUCTION
    integrate_instruction: str = INTEGRATE_INSTRUCTION
    tool_schemas: List[Dict[str, Any]] = field(default_factory=lambda: list(TOOL_SCHEMAS))

@dataclass
class ConversionResult:
    reply: str
    history: History
    tool_results: List[ToolResult] = field(default_factory=list)
    attempts: int = 1

async def convert_markup(message: str, generator: CandidateGenerator, config: Optional[ConversionConfig]=None, history: Optional[History]=None, tools: Mapping[str, Callable[[Any], Any]]=DEFAULT_TOOLS, pipeline: Optional[NormalizationPipeline]=None) -> ConversionResult:
    cfg = config or ConversionConfig()
    history = (history if history is not None else History.start(cfg.system_prompt)).user(message)
    plan = await generator.generate(history, tools=cfg.tool_schemas)
    calls = [ToolCall.from_dict(c) for c in plan.tool_calls]
    if not calls and plan.content:
        calls = await resolve_tool_calls(plan.content, getattr(generator, 'normalize_tool_call', None), generator.repair_json)
    tool_results: List[ToolResult] = []
    candidate = plan.content
    if calls:
        history = history.assistant(plan.content, [c.to_dict() for c in calls])
        logger.info('Planner requested %d tool call(s)', len(calls))
        tool_results, history = await handle_tool_calls(calls, history, tools, repairer=generator.repair_json, limit=cfg.tool_concurrency)
        history = history.user(cfg.integrate_instruction)
        candidate = (await generator.generate(history)).content
    outcome = await generate_and_validate(candidate, history, generator, max_attempts=cfg.max_attempts, corrective_instruction=cfg.corrective_instruction, pipeline=pipeline)
    return ConversionResult(reply=outcome.text, history=outcome.history, tool_results=tool_results, attempts=outcome.attempts)
