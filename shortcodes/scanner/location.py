"""
Shortcode locations and the registry that publishes them.

A ShortcodeLocation is created Open when its opening tag is recognized and
becomes Closed exactly once through ``finish``. Only Closed locations can be
published in a LocationRegistry.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, overload

from .arguments import ArgumentList, ShortcodeArgument
from ..errors import ShortcodeStateError


class ShortcodeLocation:
    """
    One shortcode instance in a document.

    Offsets are buffer positions: ``start_offset`` is the first character of
    the opening tag, ``end_offset`` is one past the closing tag (or one past
    the self-closing tag). The inner content spans
    ``[content_start, content_end)``.
    """

    __slots__ = (
        "_start", "_name", "_arguments", "_content_start",
        "_self_closing", "_end", "_content", "_children",
    )

    def __init__(
        self,
        start_offset: int,
        name: str,
        arguments: Iterable[Tuple[str, str]] = (),
        content_start: Optional[int] = None,
        self_closing: bool = False,
    ):
        if not name:
            raise ValueError("Shortcode name must not be empty")
        self._start = start_offset
        self._name = name
        self._arguments: ArgumentList = tuple(ShortcodeArgument(k, v) for k, v in arguments)
        self._content_start = start_offset if content_start is None else content_start
        self._self_closing = self_closing
        self._end: Optional[int] = None
        self._content = ""
        self._children: List[ShortcodeLocation] = []

    # ======= State transition =======

    def finish(self, end_offset: int, content: str = "") -> None:
        """
        Closes the location.

        Raises:
            ShortcodeStateError: If already closed or offsets are inconsistent
        """
        if self._end is not None:
            raise ShortcodeStateError(f"Shortcode '{self._name}' at {self._start} is already finished")
        if end_offset <= self._start:
            raise ShortcodeStateError(
                f"End offset {end_offset} must be greater than start offset {self._start}"
            )
        if self._content_start + len(content) > end_offset:
            raise ShortcodeStateError(
                f"Content of '{self._name}' overruns its end offset {end_offset}"
            )
        self._end = end_offset
        self._content = content

    def add_child(self, child: "ShortcodeLocation") -> None:
        """Attaches a nested location; only allowed while Open."""
        if self._end is not None:
            raise ShortcodeStateError(f"Cannot add children to finished shortcode '{self._name}'")
        self._children.append(child)

    # ======= Accessors =======

    @property
    def start_offset(self) -> int:
        return self._start

    @property
    def name(self) -> str:
        return self._name

    @property
    def arguments(self) -> ArgumentList:
        return self._arguments

    @property
    def content_start(self) -> int:
        return self._content_start

    @property
    def self_closing(self) -> bool:
        return self._self_closing

    @property
    def is_closed(self) -> bool:
        return self._end is not None

    @property
    def end_offset(self) -> int:
        return self._require_closed("end_offset")

    @property
    def inner_content(self) -> str:
        self._require_closed("inner_content")
        return self._content

    @property
    def content_end(self) -> int:
        self._require_closed("content_end")
        return self._content_start + len(self._content)

    @property
    def children(self) -> Tuple["ShortcodeLocation", ...]:
        return tuple(self._children)

    @property
    def positional(self) -> List[str]:
        """Values of arguments given without a key."""
        return [arg.value for arg in self._arguments if not arg.key]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first argument with this key."""
        for arg in self._arguments:
            if arg.key == key:
                return arg.value
        return default

    def get_all(self, key: str) -> List[str]:
        """Values of all arguments with this key, in order."""
        return [arg.value for arg in self._arguments if arg.key == key]

    def to_dict(self) -> Dict[str, Any]:
        self._require_closed("to_dict")
        built: Dict[int, Dict[str, Any]] = {}
        for location in iter_innermost_first([self]):
            data = location._fields()
            data["children"] = [built.pop(id(child)) for child in location._children]
            built[id(location)] = data
        return built[id(self)]

    def _fields(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "start": self._start,
            "end": self._end,
            "content_start": self._content_start,
            "content_end": self.content_end,
            "self_closing": self._self_closing,
            "arguments": [[arg.key, arg.value] for arg in self._arguments],
            "content": self._content,
        }

    def _require_closed(self, what: str) -> int:
        if self._end is None:
            raise ShortcodeStateError(
                f"Cannot read {what} of shortcode '{self._name}' at {self._start}: it is still open"
            )
        return self._end

    def __repr__(self) -> str:
        span = f"{self._start}:{self._end}" if self._end is not None else f"{self._start}:?"
        return f"ShortcodeLocation({self._name!r}, {span}, args={list(self._arguments)!r})"


class LocationRegistry(Sequence):
    """
    Ordered forest of finished shortcode locations of one document.

    Top-level entries are in ascending start offset, each carrying its
    children in the same order. Construction validates closed state,
    containment and sibling ordering; the registry is read-only afterwards.
    """

    def __init__(self, locations: Iterable[ShortcodeLocation] = (), text_length: Optional[int] = None):
        self._locations: Tuple[ShortcodeLocation, ...] = tuple(locations)
        _validate(self._locations, text_length)

    @overload
    def __getitem__(self, index: int) -> ShortcodeLocation: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[ShortcodeLocation, ...]: ...

    def __getitem__(self, index):
        return self._locations[index]

    def __len__(self) -> int:
        return len(self._locations)

    def __iter__(self) -> Iterator[ShortcodeLocation]:
        return iter(self._locations)

    def walk(self) -> Iterator[ShortcodeLocation]:
        """All locations depth-first, parents before children."""
        stack = list(reversed(self._locations))
        while stack:
            location = stack.pop()
            yield location
            stack.extend(reversed(location.children))

    def innermost_first(self) -> Iterator[ShortcodeLocation]:
        """All locations with children before their parents (substitution order)."""
        return iter_innermost_first(self._locations)

    def names(self) -> List[str]:
        """Distinct shortcode names in walk order."""
        seen: Dict[str, None] = {}
        for location in self.walk():
            seen.setdefault(location.name, None)
        return list(seen)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [location.to_dict() for location in self._locations]

    def __repr__(self) -> str:
        return f"LocationRegistry({list(self._locations)!r})"


def iter_innermost_first(roots: Iterable[ShortcodeLocation]) -> Iterator[ShortcodeLocation]:
    """Post-order walk of a forest: children in order, then their parent."""
    stack: List[Tuple[ShortcodeLocation, bool]] = [(root, False) for root in reversed(tuple(roots))]
    while stack:
        location, expanded = stack.pop()
        if expanded:
            yield location
            continue
        stack.append((location, True))
        stack.extend((child, False) for child in reversed(location.children))


def _validate(roots: Tuple[ShortcodeLocation, ...], text_length: Optional[int]) -> None:
    # (siblings, lower bound, upper bound) per pending level
    pending: List[Tuple[Tuple[ShortcodeLocation, ...], int, Optional[int]]] = [(roots, 0, text_length)]
    while pending:
        locations, lower, upper = pending.pop()
        previous_end = lower
        for location in locations:
            if not location.is_closed:
                raise ShortcodeStateError(f"Cannot publish open shortcode '{location.name}' at {location.start_offset}")
            if location.start_offset < previous_end:
                raise ShortcodeStateError(
                    f"Shortcode '{location.name}' at {location.start_offset} overlaps or precedes "
                    f"its previous sibling (ends at {previous_end})"
                )
            if upper is not None and location.end_offset > upper:
                raise ShortcodeStateError(
                    f"Shortcode '{location.name}' at {location.start_offset} exceeds its container (ends at {upper})"
                )
            if location.children:
                pending.append((location.children, location.content_start, location.content_end))
            previous_end = location.end_offset


EMPTY_REGISTRY = LocationRegistry()


__all__ = ["ShortcodeLocation", "LocationRegistry", "EMPTY_REGISTRY", "iter_innermost_first"]
