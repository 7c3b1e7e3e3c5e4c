"""
Parser for the attribute list of a shortcode tag.

Turns the raw text between a shortcode name and the tag terminator into
an ordered sequence of (key, value) pairs:

    x=1 title="Hello world" verbatim 'it\\'s'

    -> [("x", "1"), ("title", "Hello world"), ("", "verbatim"), ("", "it's")]

Duplicate keys are kept, order is preserved. A bare token is a positional
argument with an empty key.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from ..errors import InvalidArgumentSyntax

QUOTES = ("\"", "'")


class ShortcodeArgument(NamedTuple):
    """One argument of a shortcode; ``key`` is empty for positional arguments."""
    key: str
    value: str


ArgumentList = Tuple[ShortcodeArgument, ...]


def read_quoted(text: str, pos: int, escape: str = "\\") -> Optional[Tuple[str, int]]:
    """
    Reads a quoted value starting at ``text[pos]`` (the opening quote).

    Inside the quotes the escape character escapes the matching quote
    and itself; any other escape sequence is kept as is.

    Returns:
        (unescaped value, position after the closing quote) or None
        if the quote is never closed
    """
    quote = text[pos]
    parts: List[str] = []
    i = pos + 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == escape and i + 1 < length and text[i + 1] in (quote, escape):
            parts.append(text[i + 1])
            i += 2
            continue
        if ch == quote:
            return "".join(parts), i + 1
        parts.append(ch)
        i += 1
    return None


class ArgumentParser:
    """
    Single-pass tokenizer of attribute text.

    Offsets in raised errors are buffer offsets: ``base_offset`` is the
    position of ``text`` inside the scanned document.
    """

    def __init__(self, text: str, escape: str = "\\", base_offset: int = 0):
        self.text = text
        self.escape = escape
        self.base_offset = base_offset
        self.position = 0
        self.length = len(text)

    def parse(self) -> ArgumentList:
        """
        Parses the whole attribute text.

        Raises:
            InvalidArgumentSyntax: On an unterminated quote, a key without
                a value or a value without a key
        """
        args: List[ShortcodeArgument] = []

        while True:
            self._skip_whitespace()
            if self.position >= self.length:
                break
            args.append(self._parse_token())

        return tuple(args)

    def _parse_token(self) -> ShortcodeArgument:
        token_start = self.position

        if self.text[self.position] in QUOTES:
            return ShortcodeArgument("", self._parse_quoted())

        # Key or bare token up to whitespace or the first '='
        while self.position < self.length:
            ch = self.text[self.position]
            if ch.isspace() or ch == "=":
                break
            self.position += 1

        if self.position >= self.length or self.text[self.position] != "=":
            return ShortcodeArgument("", self.text[token_start:self.position])

        key = self.text[token_start:self.position]
        if not key:
            raise self._error("Missing argument name before '='", token_start)
        self.position += 1  # '='

        if self.position >= self.length or self.text[self.position].isspace():
            raise self._error(f"Missing value for argument '{key}'", token_start)

        if self.text[self.position] in QUOTES:
            return ShortcodeArgument(key, self._parse_quoted())

        value_start = self.position
        while self.position < self.length and not self.text[self.position].isspace():
            self.position += 1
        return ShortcodeArgument(key, self.text[value_start:self.position])

    def _parse_quoted(self) -> str:
        quote_pos = self.position
        result = read_quoted(self.text, quote_pos, self.escape)
        if result is None:
            raise self._error(f"Unterminated quote {self.text[quote_pos]}", quote_pos)

        value, self.position = result
        if self.position < self.length and not self.text[self.position].isspace():
            raise self._error(
                f"Unexpected {self.text[self.position]!r} after quoted value",
                self.position,
            )
        return value

    def _skip_whitespace(self) -> None:
        while self.position < self.length and self.text[self.position].isspace():
            self.position += 1

    def _error(self, message: str, pos: int) -> InvalidArgumentSyntax:
        return InvalidArgumentSyntax(message, self.base_offset + pos)


def parse_arguments(text: str, escape: str = "\\", base_offset: int = 0) -> ArgumentList:
    """
    Convenience wrapper around ArgumentParser.

    Args:
        text: Raw attribute text
        escape: Escape character recognized inside quotes
        base_offset: Offset of ``text`` in the document, for diagnostics

    Returns:
        Tuple of arguments in source order (empty for empty text)
    """
    return ArgumentParser(text, escape, base_offset).parse()


__all__ = [
    "ShortcodeArgument",
    "ArgumentList",
    "ArgumentParser",
    "parse_arguments",
    "read_quoted",
    "QUOTES",
]
