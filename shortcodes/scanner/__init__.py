"""
Shortcode scanning core: tag scanner, argument parser, nesting tracker
and the published location registry.
"""

from __future__ import annotations

from .arguments import ShortcodeArgument, ArgumentParser, parse_arguments
from .lexer import TagScanner, scan_tags
from .location import ShortcodeLocation, LocationRegistry, EMPTY_REGISTRY
from .tokens import TagEvent, TagKind
from .tracker import NestingTracker, build_locations

__all__ = [
    "ShortcodeArgument",
    "ArgumentParser",
    "parse_arguments",
    "TagScanner",
    "scan_tags",
    "TagEvent",
    "TagKind",
    "ShortcodeLocation",
    "LocationRegistry",
    "EMPTY_REGISTRY",
    "NestingTracker",
    "build_locations",
]
