from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol
from ..tree.node import Document
from ..tree.pipeline import NormalizationPipeline
from .errors import ExhaustedRetries, MalformedCandidate
from .history import History
from .lenient_json import parse_strict
from .llm_client import LLMClient, normalize_tool_call_with_llm, repair_json_with_llm
logger = logging.getLogger(__name__)
CORRECTIVE_INSTRUCTION = 'The integrated result is not valid JSON. Integrate the results again and output only the JSON object.'

@dataclass
class GeneratorReply:
    content: str = ''
    tool_calls: List[Dict[str, Any]] = field(default_factory=list)

class CandidateGenerator(Protocol):
    """Produces candidates from a history.

    Generators may also define ``async normalize_tool_call(block) -> str`` to rebuild
    textual ``<tool_call>`` blocks that the built-in pattern cannot read.
    """

    async def generate(self, history: History, *, tools: Optional[List[Dict[str, Any]]]=None) -> GeneratorReply:
        ...

    async def repair_json(self, text: str) -> str:
        ...

class LLMCandidateGenerator:

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    async def generate(self, history: History, *, tools: Optional[List[Dict[str, Any]]]=None) -> GeneratorReply:
        kwargs: Dict[str, Any] = {'tools': tools} if tools else {}
        message = await asyncio.to_thread(self.llm.chat, history.to_list(), **kwargs)
        return GeneratorReply(content=str(message.get('content') or ''), tool_calls=list(message.get('tool_calls') or []))

    async def repair_json(self, text: str) -> str:
        return await asyncio.to_thread(repair_json_with_llm, self.llm, text)

    async def normalize_tool_call(self, block: str) -> str:
        return await asyncio.to_thread(normalize_tool_call_with_llm, self.llm, block)

@dataclass
class ValidationOutcome:
    document: Document
    text: str
    attempts: int
    history: History

def parse_candidate(content: Optional[str]) -> Document:
    value = parse_strict(content)
    try:
        return Document.from_dict(value)
    except TypeError as exc:
        raise MalformedCandidate(str(exc), candidate=content or '') from exc

async def generate_and_validate(initial_content: Optional[str], history: History, generator: Optional[CandidateGenerator], *, max_attempts: int=3, corrective_instruction: str=CORRECTIVE_INSTRUCTION, pipeline: Optional[NormalizationPipeline]=None) -> ValidationOutcome:
    if max_attempts < 1:
        raise ValueError(f'max_attempts must be >= 1, got {max_attempts}')
    content = initial_content
    last_error: Optional[MalformedCandidate] = None
    for attempt in range(1, max_attempts + 1):
        try:
            document = parse_candidate(content)
        except MalformedCandidate as exc:
            last_error = exc
            logger.warning('Candidate %d/%d rejected: %s', attempt, max_attempts, exc)
            if attempt == max_attempts or generator is None:
                raise ExhaustedRetries(attempt, last_error) from exc
            history = history.assistant(content).user(corrective_instruction)
            reply = await generator.generate(history)
            content = reply.content
            continue
        document = (pipeline or NormalizationPipeline()).run(document)
        logger.info('Candidate accepted on attempt %d', attempt)
        return ValidationOutcome(document=document, text=document.to_json(), attempts=attempt, history=history.assistant(content))
    raise ExhaustedRetries(max_attempts, last_error)
