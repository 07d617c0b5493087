"""Stable rendering for markdown that is still streaming in."""

from .blocks import parse_markdown_into_blocks
from .completion import INCOMPLETE_LINK_HREF, parse_incomplete_markdown
from .config import MarkdownTheme, StreamdownConfig, load_config
from .streaming import BlockUpdate, ChunkBuffer, MarkdownStream, RenderedBlock

__all__ = [
    "INCOMPLETE_LINK_HREF",
    "BlockUpdate",
    "ChunkBuffer",
    "MarkdownStream",
    "MarkdownTheme",
    "RenderedBlock",
    "StreamdownConfig",
    "load_config",
    "parse_incomplete_markdown",
    "parse_markdown_into_blocks",
]
__version__ = "0.1.0"
