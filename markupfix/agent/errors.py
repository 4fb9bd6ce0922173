from __future__ import annotations
from typing import Optional

class MarkupFixError(Exception):
    pass

class MalformedCandidate(MarkupFixError):

    def __init__(self, message: str, candidate: str='') -> None:
        super().__init__(message)
        self.candidate = candidate

class ExhaustedRetries(MarkupFixError):

    def __init__(self, attempts: int, last_error: Optional[BaseException]=None) -> None:
        detail = f': {last_error}' if last_error else ''
        super().__init__(f'Failed to obtain a valid candidate after {attempts} attempt(s){detail}')
        self.attempts = attempts
        self.last_error = last_error

class ToolArgumentMalformed(MarkupFixError):

    def __init__(self, tool_name: str, raw_arguments: str, reason: str='') -> None:
        super().__init__(f"Arguments for tool '{tool_name}' could not be parsed{': ' + reason if reason else ''}")
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments

class UnknownOperation(MarkupFixError):

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool '{tool_name}' does not exist.")
        self.tool_name = tool_name

class LLMRequestError(MarkupFixError):
    pass
__all__ = ['ExhaustedRetries', 'LLMRequestError', 'MalformedCandidate', 'MarkupFixError', 'ToolArgumentMalformed', 'UnknownOperation']
