from __future__ import annotations

from .load import load_config, load_config_from
from .model import Delimiters, DEFAULT_DELIMITERS, ShortcodesConfig
from .paths import CFG_FILE, config_path

__all__ = [
    "Delimiters",
    "DEFAULT_DELIMITERS",
    "ShortcodesConfig",
    "load_config",
    "load_config_from",
    "CFG_FILE",
    "config_path",
]
