"""
Tests for the shortcode argument parser.

Covers bare and keyed tokens, quoting and escaping, duplicate keys
and the syntax errors with their buffer offsets.
"""

import pytest

from shortcodes.errors import InvalidArgumentSyntax
from shortcodes.scanner.arguments import ArgumentParser, ShortcodeArgument, parse_arguments, read_quoted


class TestArgumentParser:
    """Well-formed attribute text."""

    def test_empty_text(self):
        """Empty attribute text yields no arguments."""
        assert parse_arguments("") == ()

    def test_whitespace_only(self):
        assert parse_arguments("  \t\n ") == ()

    def test_key_value(self):
        args = parse_arguments(" x=1")

        assert args == (("x", "1"),)
        assert isinstance(args[0], ShortcodeArgument)
        assert args[0].key == "x"
        assert args[0].value == "1"

    def test_positional_argument(self):
        """A bare token is a positional argument with an empty key."""
        assert parse_arguments("verbatim") == (("", "verbatim"),)

    def test_duplicate_keys_keep_order(self):
        args = parse_arguments("x=1 y=2 x=3 tail")

        assert args == (("x", "1"), ("y", "2"), ("x", "3"), ("", "tail"))

    def test_double_quoted_value(self):
        assert parse_arguments('title="Hello world"') == (("title", "Hello world"),)

    def test_single_quoted_value(self):
        assert parse_arguments("title='Hello world'") == (("title", "Hello world"),)

    def test_quoted_positional(self):
        assert parse_arguments('"two words" next') == (("", "two words"), ("", "next"))

    def test_escaped_quote(self):
        assert parse_arguments(r"title='it\'s'") == (("title", "it's"),)
        assert parse_arguments(r'q="say \"hi\""') == (("q", 'say "hi"'),)

    def test_escaped_escape(self):
        assert parse_arguments(r'path="a\\b"') == (("path", "a\\b"),)

    def test_other_escape_sequences_kept(self):
        assert parse_arguments(r'text="a\nb"') == (("text", "a\\nb"),)

    def test_other_quote_inside_quotes(self):
        assert parse_arguments("""a="it's" b='say "x"'""") == (("a", "it's"), ("b", 'say "x"'))

    def test_custom_escape_character(self):
        assert parse_arguments('q="a^"b"', escape="^") == (("q", 'a"b'),)

    def test_value_with_equals(self):
        assert parse_arguments("url=a=b") == (("url", "a=b"),)

    def test_quote_inside_unquoted_value_is_literal(self):
        assert parse_arguments('x=a"b') == (("x", 'a"b'),)

    def test_empty_quoted_value(self):
        assert parse_arguments('x=""') == (("x", ""),)

    def test_multiline_attribute_text(self):
        assert parse_arguments("a=1\n  b=2\n") == (("a", "1"), ("b", "2"))


class TestArgumentErrors:
    """Malformed attribute text."""

    def test_unterminated_quote(self):
        with pytest.raises(InvalidArgumentSyntax) as exc_info:
            parse_arguments('x="abc')

        assert exc_info.value.offset == 2

    def test_dangling_key_at_end(self):
        with pytest.raises(InvalidArgumentSyntax) as exc_info:
            parse_arguments("a=1 key=")

        assert exc_info.value.offset == 4
        assert "key" in str(exc_info.value)

    def test_dangling_key_before_whitespace(self):
        with pytest.raises(InvalidArgumentSyntax):
            parse_arguments("key= value")

    def test_missing_key(self):
        with pytest.raises(InvalidArgumentSyntax) as exc_info:
            parse_arguments(" =value")

        assert exc_info.value.offset == 1

    def test_garbage_after_quoted_value(self):
        with pytest.raises(InvalidArgumentSyntax) as exc_info:
            parse_arguments('x="a"b')

        assert exc_info.value.offset == 5

    def test_base_offset_is_added(self):
        """Offsets are reported as buffer offsets."""
        with pytest.raises(InvalidArgumentSyntax) as exc_info:
            ArgumentParser("x='abc", base_offset=100).parse()

        assert exc_info.value.offset == 102


class TestReadQuoted:
    def test_returns_value_and_end(self):
        assert read_quoted('"abc" rest', 0) == ("abc", 5)

    def test_unterminated(self):
        assert read_quoted('"abc', 0) is None

    def test_trailing_escape_is_literal(self):
        assert read_quoted('"a\\', 0) is None
