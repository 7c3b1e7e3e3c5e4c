"""
Loading of shortcodes.yaml.

User keys are laid over the module defaults; a missing file yields
the defaults unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import ShortcodesConfig
from .paths import config_path
from ..errors import ConfigError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> Dict[str, Any]:
    """Reads a YAML file and returns its top-level mapping."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """User values over the defaults; delimiters are merged key by key."""
    cfg = ShortcodesConfig().to_dict()
    delimiters = raw.get("delimiters")
    if delimiters is not None and not isinstance(delimiters, dict):
        raise ConfigError(f"delimiters: expected mapping, got {type(delimiters).__name__}")
    merged = dict(cfg)
    merged.update({k: v for k, v in raw.items() if k != "delimiters"})
    merged["delimiters"] = {**cfg["delimiters"], **(delimiters or {})}
    return merged


def load_config(path: Path) -> ShortcodesConfig:
    """
    Load a configuration file.

    Args:
        path: Path to shortcodes.yaml (may not exist)

    Returns:
        Effective configuration

    Raises:
        ConfigError: On malformed YAML or invalid values
    """
    raw = _read_yaml_map(path)
    if not raw:
        logger.debug(f"No configuration at {path}, using defaults")
        return ShortcodesConfig()
    cfg = ShortcodesConfig.from_dict(_merge_defaults(raw))
    logger.debug(f"Loaded configuration from {path}: {cfg.to_dict()}")
    return cfg


def load_config_from(root: Path) -> ShortcodesConfig:
    """Load shortcodes.yaml from a root directory."""
    return load_config(config_path(root))


__all__ = ["load_config", "load_config_from"]
