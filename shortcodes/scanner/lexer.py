"""
Tag scanner.

Single forward pass over a document that recognizes opening, self-closing
and closing shortcode tags. Text outside tags is not tokenized: it is
passthrough content of whatever shortcode encloses it.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional, Tuple

from .arguments import QUOTES, read_quoted
from .tokens import TagEvent, TagKind
from ..config.model import Delimiters, DEFAULT_DELIMITERS
from ..errors import (
    MalformedClosingTag,
    MalformedTagName,
    ShortcodeSyntaxError,
    UnterminatedTag,
)

logger = logging.getLogger(__name__)

NAME_RE = re.compile(r"[\w\-]+")


class TagScanner:
    """
    Recognizes tags delimited by a Delimiters configuration.

    With the default markers:

        <<name args>>     opening tag
        <<name args/>>    self-closing tag
        <</name>>         closing tag
    """

    def __init__(self, delimiters: Delimiters = DEFAULT_DELIMITERS):
        self.delimiters = delimiters
        # Longer marker first, so a close prefix sharing the open marker wins
        markers = sorted((delimiters.open, delimiters.close_prefix), key=len, reverse=True)
        self.marker_re = re.compile("|".join(re.escape(m) for m in markers))

        # Positional state
        self.text = ""
        self.length = 0

    def scan(self, text: str) -> List[TagEvent]:
        """
        Scans the whole text and returns its tag events.

        Raises:
            ShortcodeSyntaxError: On the first malformed or unterminated tag
        """
        return list(self.iter_events(text))

    def iter_events(self, text: str) -> Iterator[TagEvent]:
        """
        Lazily yields tag events in buffer order.

        Consumers may stop between events; no state outlives the iterator.
        """
        self.text = text
        self.length = len(text)
        position = 0
        count = 0

        while True:
            match = self.marker_re.search(self.text, position)
            if match is None:
                break

            if match.group(0) == self.delimiters.close_prefix:
                event = self._scan_closing(match.start())
            else:
                event = self._scan_opening(match.start())

            count += 1
            logger.debug(f"Scanned {event!r}")
            yield event
            position = event.end

        logger.debug(f"Scanned {count} tags in text of length {self.length}")

    # ======= Internal methods =======

    def _scan_opening(self, start: int) -> TagEvent:
        """Opening or self-closing tag starting at ``start``."""
        name_start = start + len(self.delimiters.open)
        if name_start >= self.length:
            raise self._error(UnterminatedTag(None, start))

        match = NAME_RE.match(self.text, name_start)
        if not match:
            raise self._error(MalformedTagName(
                f"Missing or invalid shortcode name (found {self.text[name_start]!r})",
                name_start,
            ))

        name = match.group(0)
        position = match.end()

        if position >= self.length:
            raise self._error(UnterminatedTag(name, start))

        ch = self.text[position]
        if not ch.isspace() and self._terminator_at(position) is None:
            raise self._error(MalformedTagName(
                f"Invalid character {ch!r} in shortcode name '{name}'",
                position,
            ))

        terminator_pos, kind = self._find_terminator(position, name, start)
        marker = self.delimiters.self_close if kind is TagKind.SELF_CLOSE else self.delimiters.close

        return TagEvent(
            kind=kind,
            name=name,
            start=start,
            end=terminator_pos + len(marker),
            args_raw=self.text[position:terminator_pos],
            args_start=position,
        )

    def _find_terminator(self, position: int, name: str, start: int) -> Tuple[int, TagKind]:
        """
        Finds the terminator of an opening tag, skipping quoted values.

        A quote counts only where the argument parser would read a quoted
        value: at the start of a token or right after its first '='.
        An unterminated quote is taken literally so the argument parser
        can report it.
        """
        token_start = True
        after_equals = False
        seen_equals = False

        while position < self.length:
            kind = self._terminator_at(position)
            if kind is not None:
                return position, kind

            ch = self.text[position]
            if ch.isspace():
                token_start, after_equals, seen_equals = True, False, False
                position += 1
                continue

            if ch in QUOTES and (token_start or after_equals):
                quoted = read_quoted(self.text, position, self.delimiters.escape)
                if quoted is not None:
                    position = quoted[1]
                    token_start = after_equals = False
                    continue

            after_equals = ch == "=" and not seen_equals
            seen_equals = seen_equals or ch == "="
            token_start = False
            position += 1

        raise self._error(UnterminatedTag(name, start))

    def _terminator_at(self, position: int) -> Optional[TagKind]:
        if self.text.startswith(self.delimiters.self_close, position):
            return TagKind.SELF_CLOSE
        if self.text.startswith(self.delimiters.close, position):
            return TagKind.OPEN
        return None

    def _scan_closing(self, start: int) -> TagEvent:
        """Closing tag starting at ``start``; carries only a name."""
        position = self._skip_whitespace(start + len(self.delimiters.close_prefix))
        if position >= self.length:
            raise self._error(UnterminatedTag(None, start))

        match = NAME_RE.match(self.text, position)
        if not match:
            raise self._error(MalformedClosingTag(
                f"Closing tag without a shortcode name (found {self.text[position]!r})",
                position,
            ))

        name = match.group(0)
        position = self._skip_whitespace(match.end())
        if position >= self.length:
            raise self._error(UnterminatedTag(name, start))

        if not self.text.startswith(self.delimiters.close, position):
            raise self._error(MalformedClosingTag(
                f"Unexpected {self.text[position]!r} in closing tag '{name}'",
                position,
            ))

        return TagEvent(
            kind=TagKind.CLOSE,
            name=name,
            start=start,
            end=position + len(self.delimiters.close),
        )

    def _skip_whitespace(self, position: int) -> int:
        while position < self.length and self.text[position].isspace():
            position += 1
        return position

    def _error(self, error: ShortcodeSyntaxError) -> ShortcodeSyntaxError:
        return error.locate(self.text)


def scan_tags(text: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> List[TagEvent]:
    """
    Convenience function for scanning a document.

    Args:
        text: Document content
        delimiters: Tag markers

    Returns:
        Tag events in buffer order

    Raises:
        ShortcodeSyntaxError: On a malformed or unterminated tag
    """
    return TagScanner(delimiters).scan(text)


__all__ = ["TagScanner", "scan_tags", "NAME_RE"]
