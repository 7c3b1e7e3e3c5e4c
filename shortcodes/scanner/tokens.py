"""
Tag events produced by the scanner.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TagKind(enum.Enum):
    """Kinds of tags recognized in a document."""
    OPEN = "OPEN"
    SELF_CLOSE = "SELF_CLOSE"
    CLOSE = "CLOSE"


@dataclass(frozen=True)
class TagEvent:
    """
    One recognized tag with its buffer offsets.

    ``end`` is one past the tag terminator; for an opening tag this is where
    its inner content begins. Closing tags carry no arguments.
    """
    kind: TagKind
    name: str
    start: int
    end: int
    args_raw: str = ""
    args_start: int = 0     # Offset of args_raw in the buffer

    def __repr__(self) -> str:
        return f"TagEvent({self.kind.name}, {self.name!r}, {self.start}:{self.end})"


__all__ = ["TagKind", "TagEvent"]
