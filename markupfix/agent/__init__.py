from __future__ import annotations
from typing import TYPE_CHECKING, Any
if __package__ and __package__.startswith('markupfix.'):
    __all__ = ['CandidateGenerator', 'ConversionConfig', 'ConversionResult', 'DEFAULT_TOOLS', 'ExhaustedRetries', 'GeneratorReply', 'History', 'LLMCandidateGenerator', 'LLMClient', 'LLMConfig', 'TaskOutcome', 'ToolCall', 'ToolResult', 'ValidationOutcome', 'convert_markup', 'create_llm_client', 'generate_and_validate', 'handle_tool_calls', 'normalize_tool_calls', 'parse_lenient', 'parse_tool_arguments', 'resolve_tool_calls', 'run_with_concurrency_limit']
    if TYPE_CHECKING:
        from .conversion import ConversionConfig, ConversionResult, convert_markup
        from .errors import ExhaustedRetries
        from .history import History
        from .lenient_json import parse_lenient, parse_tool_arguments
        from .llm_client import LLMClient, LLMConfig, create_llm_client
        from .regenerate import CandidateGenerator, GeneratorReply, LLMCandidateGenerator, ValidationOutcome, generate_and_validate
        from .task_executor import TaskOutcome, run_with_concurrency_limit
        from .tool_calls import ToolCall, ToolResult, handle_tool_calls, normalize_tool_calls, resolve_tool_calls
        from .tools import DEFAULT_TOOLS
    _EXPORTS: dict[str, tuple[str, str]] = {'ConversionConfig': ('conversion', 'ConversionConfig'), 'ConversionResult': ('conversion', 'ConversionResult'), 'convert_markup': ('conversion', 'convert_markup'), 'ExhaustedRetries': ('errors', 'ExhaustedRetries'), 'History': ('history', 'History'), 'parse_lenient': ('lenient_json', 'parse_lenient'), 'parse_tool_arguments': ('lenient_json', 'parse_tool_arguments'), 'LLMClient': ('llm_client', 'LLMClient'), 'LLMConfig': ('llm_client', 'LLMConfig'), 'create_llm_client': ('llm_client', 'create_llm_client'), 'CandidateGenerator': ('regenerate', 'CandidateGenerator'), 'GeneratorReply': ('regenerate', 'GeneratorReply'), 'LLMCandidateGenerator': ('regenerate', 'LLMCandidateGenerator'), 'ValidationOutcome': ('regenerate', 'ValidationOutcome'), 'generate_and_validate': ('regenerate', 'generate_and_validate'), 'TaskOutcome': ('task_executor', 'TaskOutcome'), 'run_with_concurrency_limit': ('task_executor', 'run_with_concurrency_limit'), 'ToolCall': ('tool_calls', 'ToolCall'), 'ToolResult': ('tool_calls', 'ToolResult'), 'handle_tool_calls': ('tool_calls', 'handle_tool_calls'), 'normalize_tool_calls': ('tool_calls', 'normalize_tool_calls'), 'resolve_tool_calls': ('tool_calls', 'resolve_tool_calls'), 'DEFAULT_TOOLS': ('tools', 'DEFAULT_TOOLS')}

    def __getattr__(name: str) -> Any:
        spec = _EXPORTS.get(name)
        if spec is None:
            raise AttributeError(name)
        mod_name, attr = spec
        module = __import__(f'{__name__}.{mod_name}', fromlist=[attr])
        return getattr(module, attr)

    def __dir__() -> list[str]:
        return sorted(list(globals().keys()) + list(__all__))
else:
    __all__: list[str] = []
