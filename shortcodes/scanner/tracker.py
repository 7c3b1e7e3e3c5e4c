"""
Nesting tracker.

Consumes tag events and builds the tree of shortcode locations with
name-exact LIFO matching: a shortcode can only be closed by a closing tag
with the same name, so a name may be nested inside itself while
``<<a>> ... <</b>>`` is still reported.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .arguments import ArgumentList, parse_arguments
from .lexer import TagScanner
from .location import LocationRegistry, ShortcodeLocation
from .tokens import TagEvent, TagKind
from ..config.model import Delimiters, DEFAULT_DELIMITERS
from ..errors import (
    MismatchedClosingTag,
    ScanCancelledError,
    ShortcodeSyntaxError,
    UnterminatedTag,
)

logger = logging.getLogger(__name__)


class NestingTracker:
    """
    Stack of open shortcodes for one document.

    Each document gets its own tracker; nothing is shared between scans.
    """

    def __init__(self, text: str, escape: str = "\\"):
        self.text = text
        self.escape = escape
        self.stack: List[ShortcodeLocation] = []
        self.roots: List[ShortcodeLocation] = []

    def feed(self, event: TagEvent) -> None:
        """
        Applies one tag event.

        Raises:
            InvalidArgumentSyntax: On malformed attribute text
            MismatchedClosingTag: If the closing tag does not match the innermost open shortcode
        """
        if event.kind is TagKind.OPEN:
            location = ShortcodeLocation(
                event.start, event.name, self._parse_arguments(event), content_start=event.end
            )
            self._attach(location)
            self.stack.append(location)
            logger.debug(f"Opened '{event.name}' at {event.start} (depth {len(self.stack)})")

        elif event.kind is TagKind.SELF_CLOSE:
            location = ShortcodeLocation(
                event.start, event.name, self._parse_arguments(event),
                content_start=event.end, self_closing=True,
            )
            location.finish(event.end, "")
            self._attach(location)

        else:
            self._close(event)

    def finish(self) -> LocationRegistry:
        """
        Publishes the finished locations.

        Raises:
            UnterminatedTag: If shortcodes are still open, reported at the outermost one
        """
        if self.stack:
            outermost = self.stack[0]
            raise self._error(UnterminatedTag(
                outermost.name,
                outermost.start_offset,
                unclosed=[(loc.name, loc.start_offset) for loc in self.stack],
            ))
        registry = LocationRegistry(self.roots, text_length=len(self.text))
        logger.debug(f"Published {len(registry)} top-level shortcodes")
        return registry

    # ======= Internal methods =======

    def _attach(self, location: ShortcodeLocation) -> None:
        if self.stack:
            self.stack[-1].add_child(location)
        else:
            self.roots.append(location)

    def _close(self, event: TagEvent) -> None:
        if not self.stack:
            raise self._error(MismatchedClosingTag(None, None, event.name, event.start))

        location = self.stack[-1]
        if location.name != event.name:
            raise self._error(MismatchedClosingTag(
                location.name, location.start_offset, event.name, event.start
            ))

        self.stack.pop()
        location.finish(event.end, self.text[location.content_start:event.start])
        logger.debug(f"Closed '{event.name}' at {event.start} (depth {len(self.stack)})")

    def _parse_arguments(self, event: TagEvent) -> ArgumentList:
        try:
            return parse_arguments(event.args_raw, self.escape, base_offset=event.args_start)
        except ShortcodeSyntaxError as e:
            raise self._error(e)

    def _error(self, error: ShortcodeSyntaxError) -> ShortcodeSyntaxError:
        return error.locate(self.text)


def build_locations(
    text: str,
    delimiters: Delimiters = DEFAULT_DELIMITERS,
    cancelled: Optional[Callable[[], bool]] = None,
) -> LocationRegistry:
    """
    Scans a document and returns its location registry.

    Args:
        text: Document content
        delimiters: Tag markers
        cancelled: Checked between tag events; a true result aborts the scan

    Returns:
        Published registry; nothing is published on failure

    Raises:
        ShortcodeSyntaxError: On the first scan error
        ScanCancelledError: If the scan was cancelled
    """
    scanner = TagScanner(delimiters)
    tracker = NestingTracker(text, delimiters.escape)

    for event in scanner.iter_events(text):
        if cancelled is not None and cancelled():
            logger.debug(f"Scan cancelled before tag at {event.start}")
            raise ScanCancelledError(event.start)
        tracker.feed(event)
    return tracker.finish()


__all__ = ["NestingTracker", "build_locations"]
