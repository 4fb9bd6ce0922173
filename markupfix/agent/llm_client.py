from __future__ import annotations
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple
import httpx
import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import ChunkedEncodingError, RequestException
from urllib3.exceptions import ProtocolError
from urllib3.util import Retry
from ..config_manager import is_placeholder, load_api_keys, load_model_config
from ..paths import DEFAULT_API_CONFIG, DEFAULT_MODEL_CONFIG, EXAMPLE_API_CONFIG
from .errors import LLMRequestError
logger = logging.getLogger(__name__)
DEFAULT_BASE_URL = 'https://api.openai.com/v1'
DEFAULT_MODEL = 'qwen3-coder'
JSON_REPAIR_SYSTEM_PROMPT = 'You are a tool that repairs broken JSON strings.\n- Output exactly one JSON object or array and nothing else.\n- Do not add explanations, comments or code fences.\n- Make sure every double quote inside a string value is escaped.'
TOOL_CALL_SYSTEM_PROMPT = 'Convert the given <tool_call> block into OpenAI tool_calls format.\n- Output a JSON array containing exactly one object: {"id": ..., "type": "function", "function": {"name": ..., "arguments": ...}}.\n- "arguments" must be a JSON string encoding an object of the call parameters.\n- Output only the JSON array, without explanations or code fences.'

class LLMClient(Protocol):

    def complete(self, prompt: str, **kwargs: Any) -> str:
        ...

    def chat(self, messages: List[Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
        ...

@dataclass
class LLMConfig:
    provider: str = 'openai'
    model: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 8000
    timeout: float = 600.0

def create_llm_client(config: Optional[LLMConfig]=None, ai_client: Optional[Any]=None) -> LLMClient:
    cfg = config or LLMConfig()
    if ai_client is not None:
        return _AIClientWrapper(ai_client, cfg)
    load_api_keys(DEFAULT_API_CONFIG, set_env=True)
    load_model_config(DEFAULT_MODEL_CONFIG)
    return _EnvLLMClient(cfg)

def _first_env(*names: str) -> str:
    for name in names:
        value = (os.getenv(name) or '').strip()
        if value and (not is_placeholder(value)):
            return value
    return ''

def _message_from_response(parsed: Any) -> Dict[str, Any]:
    if hasattr(parsed, 'model_dump'):
        parsed = parsed.model_dump()
    if not isinstance(parsed, dict):
        return {'role': 'assistant', 'content': str(parsed or '')}
    choices = parsed.get('choices') or []
    if not choices:
        return {'role': 'assistant', 'content': str(parsed.get('content') or '')}
    message = choices[0].get('message') or {}
    out: Dict[str, Any] = {'role': 'assistant', 'content': message.get('content') or ''}
    if message.get('tool_calls'):
        out['tool_calls'] = message['tool_calls']
    return out

class _AIClientWrapper:

    def __init__(self, client: Any, config: LLMConfig) -> None:
        self.client = client
        self.config = config

    def chat(self, messages: List[Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = {'model': self.config.model or DEFAULT_MODEL, 'messages': messages, 'temperature': self.config.temperature, 'max_tokens': self.config.max_tokens}
        params.update({k: v for k, v in kwargs.items() if v is not None})
        try:
            resp = self.client.chat.completions.create(**params)
        except Exception as exc:
            raise LLMRequestError(f'LLM request failed ({type(exc).__name__}): {exc}') from exc
        return _message_from_response(resp)

    def complete(self, prompt: str, **kwargs: Any) -> str:
        return str(self.chat([{'role': 'user', 'content': prompt}], **kwargs).get('content') or '')

class _EnvLLMClient:
    """OpenAI-compatible ``chat/completions`` over httpx, falling back to a retrying requests session."""
    http_attempts = 5

    def __init__(self, config: LLMConfig) -> None:
        self.config = config
        self.api_key = _first_env('OPENAI_API_KEY', 'LLM_API_KEY')
        if not self.api_key:
            raise LLMRequestError(f'Missing API key for LLM provider. Set OPENAI_API_KEY or copy {EXAMPLE_API_CONFIG} to {DEFAULT_API_CONFIG}.')
        self.base_url = (os.getenv('OPENAI_API_BASE') or DEFAULT_BASE_URL).rstrip('/')
        self.model = (config.model or '').strip() or (os.getenv('OPENAI_MODEL') or DEFAULT_MODEL).strip()

    @property
    def endpoint(self) -> str:
        return f'{self.base_url}/chat/completions'

    def _headers(self) -> Dict[str, str]:
        return {'Content-Type': 'application/json', 'Authorization': f'Bearer {self.api_key}', 'Accept-Encoding': 'identity', 'Connection': 'close'}

    def _post_httpx(self, payload: Dict[str, Any]) -> Tuple[str, Optional[Exception]]:
        last_exc: Optional[Exception] = None
        for attempt in range(1, self.http_attempts + 1):
            try:
                with httpx.Client(http2=False, timeout=self.config.timeout) as client:
                    resp = client.post(self.endpoint, json=payload, headers=self._headers())
                    resp.raise_for_status()
                    return (resp.text, None)
            except httpx.HTTPError as exc:
                last_exc = exc
                logger.warning('LLM request attempt %d/%d failed: %s', attempt, self.http_attempts, exc)
                if attempt < self.http_attempts:
                    time.sleep(1)
        return ('', last_exc)

    def _post_requests(self, payload: Dict[str, Any]) -> Tuple[str, Optional[Exception]]:
        retry = Retry(total=5, connect=5, read=5, backoff_factor=1, allowed_methods=frozenset({'POST'}), status_forcelist=(502, 503, 504), raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry)
        with requests.Session() as session:
            session.mount('https://', adapter)
            session.mount('http://', adapter)
            try:
                resp = session.post(self.endpoint, json=payload, headers=self._headers(), timeout=self.config.timeout)
                resp.raise_for_status()
                return (resp.text, None)
            except (ChunkedEncodingError, RequestException, ProtocolError) as exc:
                return ('', exc)

    def chat(self, messages: List[Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'model': self.model, 'messages': messages, 'temperature': self.config.temperature, 'max_tokens': self.config.max_tokens}
        payload.update({k: v for k, v in kwargs.items() if v is not None})
        body, error = self._post_httpx(payload)
        if not body:
            logger.info('Falling back to requests session for %s', self.endpoint)
            body, error = self._post_requests(payload)
        if not body:
            raise LLMRequestError(f'LLM request failed ({type(error).__name__}): {error}') from error
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as exc:
            raise LLMRequestError(f'LLM response is not JSON: {body[:200]!r}') from exc
        return _message_from_response(parsed)

    def complete(self, prompt: str, **kwargs: Any) -> str:
        return str(self.chat([{'role': 'user', 'content': prompt}], **kwargs).get('content') or '')

def repair_json_with_llm(llm: LLMClient, broken: str) -> str:
    logger.info('Requesting LLM repair of %d chars of JSON', len(broken))
    message = llm.chat([{'role': 'system', 'content': JSON_REPAIR_SYSTEM_PROMPT}, {'role': 'user', 'content': broken}], temperature=0)
    fixed = str(message.get('content') or '').strip()
    if not fixed:
        raise LLMRequestError('LLM JSON repair returned empty content.')
    return fixed

def normalize_tool_call_with_llm(llm: LLMClient, block: str) -> str:
    logger.info('Requesting LLM normalization of a %d char tool_call block', len(block))
    message = llm.chat([{'role': 'system', 'content': TOOL_CALL_SYSTEM_PROMPT}, {'role': 'user', 'content': block}], temperature=0)
    content = str(message.get('content') or '').strip()
    if not content:
        raise LLMRequestError('LLM tool_call normalization returned empty content.')
    return content
