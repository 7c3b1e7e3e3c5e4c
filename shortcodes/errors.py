"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from ShortcodeUserError.

Programming errors and bugs should NOT inherit from ShortcodeUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import List, Optional, Tuple


class ShortcodeUserError(Exception):
    """
    Base class for all user-facing errors.

    These errors indicate problems that the document author can fix:
    malformed tags, unknown directives, broken configuration, etc.
    """
    pass


class ShortcodeStateError(RuntimeError):
    """Contract violation on a shortcode location (e.g. finished twice)."""
    pass


def position_of(text: str, offset: int) -> Tuple[int, int]:
    """1-based (line, column) of a buffer offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class ShortcodeSyntaxError(ShortcodeUserError):
    """
    Base class for errors detected while scanning a document.

    Always carries the offending buffer offset. Line and column are
    filled in once the buffer is known (see ``locate``).
    """

    def __init__(self, message: str, offset: int):
        self.message = message
        self.offset = offset
        self.line: Optional[int] = None
        self.column: Optional[int] = None
        super().__init__(message)

    def locate(self, text: str) -> "ShortcodeSyntaxError":
        """Computes line/column against the scanned buffer."""
        self.line, self.column = position_of(text, self.offset)
        return self

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} at {self.line}:{self.column} (offset {self.offset})"
        return f"{self.message} at offset {self.offset}"


class InvalidArgumentSyntax(ShortcodeSyntaxError):
    """Malformed attribute text (unterminated quote, dangling key)."""
    pass


class MalformedTagName(ShortcodeSyntaxError):
    """Opening or self-closing tag with an invalid or missing name."""
    pass


class MalformedClosingTag(ShortcodeSyntaxError):
    """Closing tag with unexpected content before its terminator."""
    pass


class UnterminatedTag(ShortcodeSyntaxError):
    """
    A tag never reaches its terminator, or directives are still open
    at end of buffer.
    """

    def __init__(self, name: Optional[str], offset: int, unclosed: Optional[List[Tuple[str, int]]] = None):
        self.name = name
        self.unclosed: List[Tuple[str, int]] = list(unclosed or [])
        if self.unclosed:
            listing = ", ".join(f"'{n}'@{o}" for n, o in self.unclosed)
            message = f"Unterminated shortcode '{name}' (still open: {listing})"
        elif name:
            message = f"Unterminated tag '{name}'"
        else:
            message = "Unterminated tag"
        super().__init__(message, offset)


class MismatchedClosingTag(ShortcodeSyntaxError):
    """Closing tag name does not match the innermost open shortcode."""

    def __init__(self, open_name: Optional[str], open_offset: Optional[int], close_name: str, close_offset: int):
        self.open_name = open_name
        self.open_offset = open_offset
        self.close_name = close_name
        self.close_offset = close_offset
        if open_name is None:
            message = f"Closing tag '{close_name}' has no open shortcode to close"
        else:
            message = (
                f"Closing tag '{close_name}' does not match open shortcode "
                f"'{open_name}' (opened at offset {open_offset})"
            )
        super().__init__(message, close_offset)


class ScanCancelledError(ShortcodeUserError):
    """The scan was aborted between tag events."""

    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"Scan cancelled at offset {offset}")


class UnknownDirectiveError(ShortcodeUserError):
    """No handler is registered for a shortcode name."""

    def __init__(self, name: str, offset: int, available: Optional[List[str]] = None):
        self.name = name
        self.offset = offset
        self.available = list(available or [])
        msg = f"Unknown shortcode '{name}' at offset {offset}"
        if self.available:
            msg += f". Available: {', '.join(self.available)}"
        super().__init__(msg)


class ShortcodeRenderError(ShortcodeUserError):
    """A handler failed while rendering a shortcode."""

    def __init__(self, name: str, offset: int, cause: Exception):
        self.name = name
        self.offset = offset
        self.cause = cause
        super().__init__(f"Shortcode '{name}' at offset {offset} failed: {cause}")


class ConfigError(ShortcodeUserError):
    """Invalid delimiter or processor configuration."""
    pass


__all__ = [
    "ShortcodeUserError",
    "ShortcodeStateError",
    "ShortcodeSyntaxError",
    "InvalidArgumentSyntax",
    "MalformedTagName",
    "MalformedClosingTag",
    "UnterminatedTag",
    "MismatchedClosingTag",
    "ScanCancelledError",
    "UnknownDirectiveError",
    "ShortcodeRenderError",
    "ConfigError",
    "position_of",
]
