from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
NOISY_LOGGERS = ('httpx', 'httpcore', 'urllib3')

def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and (not isinstance(handler, logging.FileHandler))

def setup_logging(*, console_level: int=logging.WARNING, file_path: Optional[Union[str, Path]]=None, file_level: int=logging.DEBUG, replace_existing: bool=True, quiet: Iterable[str]=NOISY_LOGGERS) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if replace_existing:
        for handler in list(root.handlers):
            root.removeHandler(handler)
    formatter = logging.Formatter(LOG_FORMAT)
    console = [h for h in root.handlers if _is_console(h)] or [logging.StreamHandler(sys.stdout)]
    for handler in console:
        handler.setLevel(console_level)
        handler.setFormatter(formatter)
        if handler not in root.handlers:
            root.addHandler(handler)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not file_path:
        return
    target = Path(file_path).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    existing = next((h for h in root.handlers if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == target), None)
    handler = existing or logging.FileHandler(target, mode='w' if replace_existing else 'a', encoding='utf-8')
    handler.setLevel(file_level)
    handler.setFormatter(formatter)
    if existing is None:
        root.addHandler(handler)
