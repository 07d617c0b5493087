"""Streaming helpers built on the block segmenter and the completer."""

from __future__ import annotations

from steadymark.streaming.buffer import ChunkBuffer
from steadymark.streaming.stream import BlockUpdate, MarkdownStream, RenderedBlock

__all__ = [
    "BlockUpdate",
    "ChunkBuffer",
    "MarkdownStream",
    "RenderedBlock",
]
