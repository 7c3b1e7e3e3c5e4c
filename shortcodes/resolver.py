"""
Innermost-first resolution of shortcodes.

A parent's content is rebuilt from its raw inner content with every child
span replaced by the child's rendered output before the parent itself is
handed to its handler. Passthrough text is copied verbatim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

from .errors import ShortcodeRenderError, ShortcodeUserError, UnknownDirectiveError
from .registry import HandlerRegistry
from .scanner.location import LocationRegistry, ShortcodeLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortcodeContext:
    """Ambient context handed to every handler call."""
    document_name: str = ""
    source: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    # Location being rendered
    location: Optional[ShortcodeLocation] = None


def splice(
    text: str,
    locations: Iterable[ShortcodeLocation],
    start: int,
    end: int,
    render: Callable[[ShortcodeLocation], str],
) -> str:
    """
    Rebuilds ``text[start:end]`` with each location's span replaced by ``render(location)``.

    Locations must be ordered, non-overlapping and inside ``[start, end)``.
    """
    parts = []
    cursor = start
    for location in locations:
        parts.append(text[cursor:location.start_offset])
        parts.append(render(location))
        cursor = location.end_offset
    parts.append(text[cursor:end])
    return "".join(parts)


class ShortcodeResolver:
    """Renders a document's locations through a handler registry."""

    def __init__(self, handlers: HandlerRegistry):
        self.handlers = handlers

    def resolve(self, text: str, locations: LocationRegistry, context: Optional[ShortcodeContext] = None) -> str:
        """
        Substitutes every shortcode in ``text``.

        Args:
            text: The buffer ``locations`` was built from
            locations: Published registry of the buffer
            context: Ambient context for handlers

        Returns:
            Text with all shortcodes replaced

        Raises:
            UnknownDirectiveError: If a shortcode has no handler
            ShortcodeRenderError: If a handler fails
        """
        ctx = context or ShortcodeContext()
        for location in locations.walk():
            if location.name not in self.handlers:
                raise UnknownDirectiveError(location.name, location.start_offset, self.handlers.names())

        # Rendered output of finished children, consumed by their parent
        rendered: Dict[int, str] = {}
        for location in locations.innermost_first():
            rendered[id(location)] = self._render(text, location, ctx, rendered)
        return splice(text, locations, 0, len(text), lambda loc: rendered.pop(id(loc)))

    def _render(
        self,
        text: str,
        location: ShortcodeLocation,
        context: ShortcodeContext,
        rendered: Dict[int, str],
    ) -> str:
        handler = self.handlers.get(location.name)
        if handler is None:
            raise UnknownDirectiveError(location.name, location.start_offset, self.handlers.names())

        content = splice(
            text,
            location.children,
            location.content_start,
            location.content_end,
            lambda child: rendered.pop(id(child)),
        )

        try:
            result = handler(location.arguments, content, replace(context, location=location))
        except ShortcodeUserError:
            raise
        except Exception as e:
            raise ShortcodeRenderError(location.name, location.start_offset, e) from e

        logger.debug(f"Rendered '{location.name}' at {location.start_offset}")
        return "" if result is None else str(result)


def resolve_text(
    text: str,
    locations: LocationRegistry,
    handlers: HandlerRegistry,
    context: Optional[ShortcodeContext] = None,
) -> str:
    """Convenience wrapper around ShortcodeResolver."""
    return ShortcodeResolver(handlers).resolve(text, locations, context)


__all__ = ["ShortcodeContext", "ShortcodeResolver", "resolve_text", "splice"]
