"""
Shortcode scanning and resolution.

Finds shortcode tags in document text, parses their arguments, tracks
nesting and publishes an ordered registry of locations from which a
resolver substitutes every shortcode innermost-first.
"""

from __future__ import annotations

from .config import Delimiters, ShortcodesConfig, load_config
from .errors import (
    ShortcodeUserError,
    ShortcodeSyntaxError,
    InvalidArgumentSyntax,
    MalformedTagName,
    MalformedClosingTag,
    UnterminatedTag,
    MismatchedClosingTag,
    UnknownDirectiveError,
)
from .processor import Document, ShortcodeProcessor, ShortcodeProcessingError, create_processor
from .registry import HandlerRegistry
from .resolver import ShortcodeContext, ShortcodeResolver
from .scanner import LocationRegistry, ShortcodeArgument, ShortcodeLocation, build_locations

__all__ = [
    "Delimiters",
    "ShortcodesConfig",
    "load_config",
    "ShortcodeUserError",
    "ShortcodeSyntaxError",
    "InvalidArgumentSyntax",
    "MalformedTagName",
    "MalformedClosingTag",
    "UnterminatedTag",
    "MismatchedClosingTag",
    "UnknownDirectiveError",
    "Document",
    "ShortcodeProcessor",
    "ShortcodeProcessingError",
    "create_processor",
    "HandlerRegistry",
    "ShortcodeContext",
    "ShortcodeResolver",
    "LocationRegistry",
    "ShortcodeArgument",
    "ShortcodeLocation",
    "build_locations",
]
