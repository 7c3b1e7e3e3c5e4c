"""Tests for HandlerRegistry."""

import logging

import pytest

from shortcodes.registry import HandlerRegistry


def test_register_and_get():
    registry = HandlerRegistry()
    handler = lambda args, content, ctx: content  # noqa: E731

    registry.register("echo", handler, "Echo content")

    assert registry.get("echo") is handler
    assert "echo" in registry
    assert registry.rules["echo"].description == "Echo content"
    assert registry.get("missing") is None


def test_decorator_uses_function_name(handlers):
    assert handlers.names() == ["b", "drop", "img", "upper"]
    assert handlers.rules["upper"].description == "Upper-cases its content."


def test_decorator_converts_underscores():
    registry = HandlerRegistry()

    @registry.shortcode()
    def table_of_contents(args, content, ctx):
        return ""

    assert "table-of-contents" in registry


def test_overwrite_logs_warning(caplog):
    registry = HandlerRegistry()
    registry.register("x", lambda a, c, ctx: "1")

    with caplog.at_level(logging.WARNING, logger="shortcodes.registry"):
        registry.register("x", lambda a, c, ctx: "2")

    assert "overwrites" in caplog.text
    assert registry.get("x")((), "", None) == "2"
    assert len(registry) == 1


def test_empty_name_rejected():
    with pytest.raises(ValueError):
        HandlerRegistry().register("", lambda a, c, ctx: "")