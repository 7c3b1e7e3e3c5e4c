"""
Registry of shortcode handlers.

Maps shortcode names to the callables that render them. The registry is
filled before processing starts and only read afterwards, so one registry
may serve parallel document passes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from .scanner.arguments import ArgumentList

if TYPE_CHECKING:
    from .resolver import ShortcodeContext

logger = logging.getLogger(__name__)

# (arguments, resolved inner content, context) -> replacement text
ShortcodeHandler = Callable[[ArgumentList, str, "ShortcodeContext"], Optional[str]]


@dataclass(frozen=True)
class HandlerRule:
    """A registered handler with its name."""
    name: str
    handler: ShortcodeHandler
    description: str = ""


class HandlerRegistry:
    """Name-keyed lookup of shortcode handlers."""

    def __init__(self):
        self.rules: Dict[str, HandlerRule] = {}

    def register(self, name: str, handler: ShortcodeHandler, description: str = "") -> None:
        """
        Registers a handler for a shortcode name.

        An existing handler with the same name is replaced.
        """
        if not name:
            raise ValueError("Shortcode name must not be empty")
        if name in self.rules:
            logger.warning(f"Handler for shortcode '{name}' overwrites existing handler")
        self.rules[name] = HandlerRule(name=name, handler=handler, description=description)

    def shortcode(self, name: Optional[str] = None, description: str = "") -> Callable[[ShortcodeHandler], ShortcodeHandler]:
        """
        Decorator form of ``register``; the function name is used by default
        (underscores become dashes).
        """
        def decorator(func: ShortcodeHandler) -> ShortcodeHandler:
            self.register(name or func.__name__.replace("_", "-"), func, description or (func.__doc__ or "").strip())
            return func
        return decorator

    def get(self, name: str) -> Optional[ShortcodeHandler]:
        rule = self.rules.get(name)
        return rule.handler if rule else None

    def names(self) -> List[str]:
        return sorted(self.rules)

    def __contains__(self, name: object) -> bool:
        return name in self.rules

    def __len__(self) -> int:
        return len(self.rules)


__all__ = ["HandlerRegistry", "HandlerRule", "ShortcodeHandler"]
