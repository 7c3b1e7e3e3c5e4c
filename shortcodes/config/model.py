"""
Configuration model: tag delimiters and processing options.
Supports serialization to and from plain mappings (YAML).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ..errors import ConfigError


@dataclass(frozen=True)
class Delimiters:
    """
    Literal markers recognized by the tag scanner.

    ``open`` starts an opening or self-closing tag, ``close`` terminates an
    opening tag, ``self_close`` terminates a self-closing tag and
    ``close_prefix`` starts a closing tag.
    """
    open: str = "<<"
    close: str = ">>"
    self_close: str = "/>>"
    close_prefix: str = "<</"
    escape: str = "\\"

    def __post_init__(self) -> None:
        for key in ("open", "close", "self_close", "close_prefix"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"delimiters.{key}: expected non-empty string, got {value!r}")
            if any(ch.isspace() for ch in value):
                raise ConfigError(f"delimiters.{key}: whitespace is not allowed in markers ({value!r})")
        if not isinstance(self.escape, str) or len(self.escape) != 1:
            raise ConfigError(f"delimiters.escape: expected a single character, got {self.escape!r}")
        if self.open == self.close_prefix:
            raise ConfigError("delimiters: 'open' and 'close_prefix' must differ")
        if self.close == self.self_close:
            raise ConfigError("delimiters: 'close' and 'self_close' must differ")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Delimiters":
        """Instance from a mapping (from YAML)."""
        if not isinstance(data, dict):
            raise ConfigError(f"delimiters: expected mapping, got {type(data).__name__}")
        known = {"open", "close", "self_close", "close_prefix", "escape"}
        extras = set(data.keys()) - known
        if extras:
            raise ConfigError(f"delimiters: unknown key(s): {sorted(extras)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "open": self.open,
            "close": self.close,
            "self_close": self.self_close,
            "close_prefix": self.close_prefix,
            "escape": self.escape,
        }


DEFAULT_DELIMITERS = Delimiters()


@dataclass(frozen=True)
class ShortcodesConfig:
    """Effective configuration of a processor."""
    delimiters: Delimiters = field(default_factory=Delimiters)
    # 0 = let the executor pick the worker count
    jobs: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.jobs, bool) or not isinstance(self.jobs, int) or self.jobs < 0:
            raise ConfigError(f"jobs: expected non-negative integer, got {self.jobs!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShortcodesConfig":
        extras = set(data.keys()) - {"delimiters", "jobs"}
        if extras:
            raise ConfigError(f"unknown key(s): {sorted(extras)}")
        delimiters = Delimiters.from_dict(data.get("delimiters") or {})
        return cls(delimiters=delimiters, jobs=data.get("jobs", 0))

    def to_dict(self) -> Dict[str, Any]:
        return {"delimiters": self.delimiters.to_dict(), "jobs": self.jobs}


__all__ = ["Delimiters", "DEFAULT_DELIMITERS", "ShortcodesConfig"]
