from __future__ import annotations

from pathlib import Path

# Single source of truth for the configuration file name.
CFG_FILE = "shortcodes.yaml"


def config_path(root: Path) -> Path:
    """Path to the configuration file shortcodes.yaml under a root directory."""
    return (root / CFG_FILE).resolve()


__all__ = ["CFG_FILE", "config_path"]
