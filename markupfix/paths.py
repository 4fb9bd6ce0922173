from __future__ import annotations
import os
from pathlib import Path
PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = Path(os.getenv('MARKUPFIX_CONFIG_DIR') or PACKAGE_ROOT / 'config')
LOGS_DIR = Path(os.getenv('MARKUPFIX_LOGS_DIR') or PACKAGE_ROOT / 'data' / 'logs')
DEFAULT_API_CONFIG = CONFIG_DIR / 'api_config.json'
EXAMPLE_API_CONFIG = CONFIG_DIR / 'api_config.example.json'
DEFAULT_MODEL_CONFIG = CONFIG_DIR / 'model_config.yaml'
__all__ = ['CONFIG_DIR', 'DEFAULT_API_CONFIG', 'DEFAULT_MODEL_CONFIG', 'EXAMPLE_API_CONFIG', 'LOGS_DIR', 'PACKAGE_ROOT']
