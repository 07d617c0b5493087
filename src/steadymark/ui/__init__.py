"""Renderers that consume the block stream."""

from __future__ import annotations

from steadymark.ui.console import LiveMarkdown, render_markdown, render_to_console
from steadymark.ui.widget import MarkdownBlock, StreamdownView

__all__ = [
    "LiveMarkdown",
    "MarkdownBlock",
    "StreamdownView",
    "render_markdown",
    "render_to_console",
]
