"""Stream session: an append-only buffer with per-block completion caching."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from steadymark.blocks import parse_markdown_into_blocks
from steadymark.completion import parse_incomplete_markdown
from steadymark.config import StreamdownConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedBlock:
    """One block ready for a renderer.

    ``source`` is the raw slice of the buffer; ``text`` is what should be
    rendered: the source without surrounding blank lines, with closers
    appended. ``stable`` is False for the block that may still grow.
    """

    index: int
    source: str
    text: str
    stable: bool


@dataclass
class BlockUpdate:
    """Blocks whose rendered text changed since the previous update."""

    changed: list[RenderedBlock] = field(default_factory=list)
    count: int = 0

    def __bool__(self) -> bool:
        return bool(self.changed)


class MarkdownStream:
    """Owns the text of one streaming response and splits it into blocks.

    Blocks are identified by their index. The completed text of a block is
    cached together with its source, so re-rendering a growing response only
    re-runs completion for blocks whose source changed (normally just the
    last one).

    Usage:
        stream = MarkdownStream()
        for chunk in chunks:
            stream.append(chunk)
            for block in stream.update().changed:
                render(block.index, block.text)
    """

    def __init__(self, config: StreamdownConfig | None = None) -> None:
        self._config = config or StreamdownConfig()
        self._text = ""
        self._finished = False
        # index -> (source, completed text)
        self._cache: dict[int, tuple[str, str]] = {}
        # index -> text reported by the last update()
        self._reported: dict[int, str] = {}

    @property
    def text(self) -> str:
        """Snapshot of everything received so far."""
        return self._text

    @property
    def finished(self) -> bool:
        return self._finished

    def append(self, chunk: str) -> None:
        """Append *chunk* to the buffer. Ignored once the stream is finished."""
        if self._finished:
            logger.warning("Ignoring %d chars appended after finish()", len(chunk))
            return
        self._text += chunk

    def blocks(self) -> list[RenderedBlock]:
        """Segment the buffer and return every block with its rendered text."""
        sources = parse_markdown_into_blocks(self._text)
        last = len(sources) - 1
        rendered = []
        for index, source in enumerate(sources):
            rendered.append(
                RenderedBlock(
                    index=index,
                    source=source,
                    text=self._render(index, source),
                    stable=self._finished or index < last,
                )
            )
        for stale in [i for i in self._cache if i > last]:
            del self._cache[stale]
        return rendered

    def update(self) -> BlockUpdate:
        """Return only the blocks whose rendered text changed since the last call.

        ``count`` is the current number of blocks; renderers should drop any
        block at or past it (the tail can merge back while a line is partial).
        """
        blocks = self.blocks()
        changed = [b for b in blocks if self._reported.get(b.index) != b.text]
        self._reported = {b.index: b.text for b in blocks}
        if changed:
            logger.debug(
                "Stream update: %d/%d blocks changed (buffer %d chars)",
                len(changed),
                len(blocks),
                len(self._text),
            )
        return BlockUpdate(changed=changed, count=len(blocks))

    def finish(self) -> list[RenderedBlock]:
        """Mark the stream complete and return the final blocks."""
        self._finished = True
        return self.blocks()

    def reset(self) -> None:
        """Forget the buffer and all cached blocks, ready for a new response."""
        self._text = ""
        self._finished = False
        self._cache.clear()
        self._reported.clear()

    def _render(self, index: int, source: str) -> str:
        cached = self._cache.get(index)
        if cached is not None and cached[0] == source:
            return cached[1]
        # Closers go right after the content, not after trailing blank lines.
        text = source.lstrip("\n").rstrip()
        if self._config.parse_incomplete_markdown:
            text = parse_incomplete_markdown(
                text, complete_links=self._config.complete_links
            )
        self._cache[index] = (source, text)
        return text
