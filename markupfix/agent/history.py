from __future__ import annotations
import copy
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

@dataclass(frozen=True)
class History:
    messages: Tuple[Dict[str, Any], ...] = ()

    @classmethod
    def start(cls, system_prompt: Optional[str]=None) -> 'History':
        if not system_prompt:
            return cls()
        return cls(({'role': 'system', 'content': system_prompt},))

    def append(self, role: str, content: Any, **extra: Any) -> 'History':
        message: Dict[str, Any] = {'role': role, 'content': content}
        message.update({k: copy.deepcopy(v) for k, v in extra.items() if v is not None})
        return History(self.messages + (message,))

    def user(self, content: str) -> 'History':
        return self.append('user', content)

    def assistant(self, content: Optional[str], tool_calls: Optional[List[Dict[str, Any]]]=None) -> 'History':
        return self.append('assistant', content or '', tool_calls=tool_calls or None)

    def tool(self, tool_call_id: str, payload: Any, name: Optional[str]=None) -> 'History':
        content = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        return self.append('tool', content, tool_call_id=tool_call_id, name=name)

    def to_list(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(m) for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def last(self) -> Optional[Dict[str, Any]]:
        return self.messages[-1] if self.messages else None
