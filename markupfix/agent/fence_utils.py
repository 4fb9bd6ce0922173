from __future__ import annotations
import re
from typing import List, Optional
_INLINE_FENCE_RE = re.compile('^```[A-Za-z0-9_+-]*\\s*(.*?)```$', re.DOTALL)
_TOOL_CALL_SPLIT_RE = re.compile('</tool_call>', re.IGNORECASE)

def strip_code_fence(raw: Optional[str]) -> str:
    if not raw:
        return ''
    stripped = raw.strip()
    lines = stripped.splitlines()
    if not lines or not lines[0].lstrip().startswith('```'):
        return stripped
    if len(lines) == 1:
        match = _INLINE_FENCE_RE.match(lines[0].strip())
        return match.group(1).strip() if match else stripped
    lines = lines[1:]
    if lines and lines[-1].rstrip().endswith('```'):
        last = lines[-1].rstrip()[:-3]
        lines = lines[:-1] + ([last] if last.strip() else [])
    return '\n'.join(lines).strip()

def split_tool_call_blocks(raw: Optional[str]) -> List[str]:
    if not raw or '<tool_call>' not in raw.lower():
        return []
    blocks: List[str] = []
    for part in _TOOL_CALL_SPLIT_RE.split(raw):
        if part.strip():
            blocks.append(part + '</tool_call>')
    return blocks
