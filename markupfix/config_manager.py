from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from .paths import DEFAULT_API_CONFIG, DEFAULT_MODEL_CONFIG
logger = logging.getLogger(__name__)
_MODEL_ENV_KEYS = {'api_key': 'OPENAI_API_KEY', 'base_url': 'OPENAI_API_BASE', 'model': 'OPENAI_MODEL'}

def is_placeholder(value: str) -> bool:
    raw = (value or '').strip().lower()
    if not raw:
        return True
    return raw.startswith('paste-your-') or raw in {'your-api-key', 'changeme', 'replace-me'}

def load_api_keys(config_path: Optional[Path]=None, set_env: bool=True) -> Dict[str, str]:
    path = Path(config_path) if config_path else DEFAULT_API_CONFIG
    if not path.exists():
        return {}
    with path.open('r', encoding='utf-8') as handle:
        payload = json.load(handle)
    api_keys = payload.get('api_keys', payload)
    applied: Dict[str, str] = {}
    for env_name, value in api_keys.items():
        if not value or is_placeholder(str(value)):
            continue
        applied[env_name] = str(value)
        if set_env:
            os.environ.setdefault(env_name, str(value))
    return applied

def load_model_config(config_path: Optional[Path]=None, set_env: bool=True) -> Dict[str, str]:
    path = Path(config_path) if config_path else DEFAULT_MODEL_CONFIG
    if not path.exists():
        return {}
    try:
        payload: Any = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as exc:
        logger.warning('Ignoring unreadable model config %s: %s', path, exc)
        return {}
    section = payload.get('openai', payload) if isinstance(payload, dict) else {}
    if not isinstance(section, dict):
        return {}
    applied: Dict[str, str] = {}
    for key, env_name in _MODEL_ENV_KEYS.items():
        value = section.get(key)
        if value is None or is_placeholder(str(value)):
            continue
        applied[env_name] = str(value)
        if set_env and (not os.getenv(env_name)):
            os.environ[env_name] = str(value)
    return applied
__all__ = ['is_placeholder', 'load_api_keys', 'load_model_config']
