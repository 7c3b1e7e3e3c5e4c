from pathlib import Path

import pytest

from shortcodes.registry import HandlerRegistry
from shortcodes.resolver import ShortcodeContext
from tests.infrastructure.file_utils import write


@pytest.fixture
def handlers() -> HandlerRegistry:
    """Registry with a few simple handlers used across tests."""
    registry = HandlerRegistry()

    @registry.shortcode()
    def upper(args, content, ctx: ShortcodeContext):
        """Upper-cases its content."""
        return content.upper()

    @registry.shortcode(name="b")
    def bold(args, content, ctx):
        return f"<b>{content}</b>"

    @registry.shortcode()
    def img(args, content, ctx):
        return f'<img src="{dict(args).get("src", "")}">'

    @registry.shortcode()
    def drop(args, content, ctx):
        return None

    return registry


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Directory with one valid and one broken document."""
    write(tmp_path / "ok.md", "Hello <<b>>world<</b>> <<img src=a.png/>>\n")
    write(tmp_path / "broken.md", "line one\n<<a>>text<</b>>\n")
    return tmp_path
