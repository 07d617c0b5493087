"""Textual widget that renders a markdown stream block by block."""

from __future__ import annotations

import logging

from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Markdown

from steadymark.completion import INCOMPLETE_LINK_HREF
from steadymark.config import StreamdownConfig
from steadymark.streaming import BlockUpdate, ChunkBuffer, MarkdownStream

logger = logging.getLogger(__name__)


class MarkdownBlock(Markdown):
    """Markdown widget for a single block of the stream."""

    DEFAULT_CSS = """
    MarkdownBlock {
        height: auto;
        margin: 0;
        padding: 0;
    }
    """

    def __init__(self, text: str, index: int) -> None:
        # Links are opened by StreamdownView so placeholder targets can be ignored.
        super().__init__(text, open_links=False, classes="block")
        self.block_index = index
        self.markdown_text = text


class StreamdownView(Vertical):
    """Renders streaming markdown with one Markdown widget per block.

    Chunks are batched at most once per frame. On each batch only the
    blocks whose completed text changed are updated; finished blocks keep
    their widgets untouched. The block still growing carries the
    ``-streaming`` class.
    """

    DEFAULT_CSS = """
    StreamdownView {
        height: auto;
    }
    """

    class Updated(Message):
        """Posted after a batch of chunks has been rendered."""

        def __init__(self, view: StreamdownView, changed: int) -> None:
            super().__init__()
            self.view = view
            self.changed = changed

    class Finished(Message):
        """Posted when the stream has been finished."""

        def __init__(self, view: StreamdownView) -> None:
            super().__init__()
            self.view = view

    def __init__(
        self,
        text: str = "",
        config: StreamdownConfig | None = None,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._config = config or StreamdownConfig()
        self._stream = MarkdownStream(self._config)
        self._chunks = ChunkBuffer(
            self.call_later,
            self._drain,
            min_interval=self._config.min_interval,
            schedule_delayed=self.set_timer,
        )
        self._blocks: list[MarkdownBlock] = []
        self._stream.append(text)

    @property
    def stream(self) -> MarkdownStream:
        return self._stream

    @property
    def blocks(self) -> list[MarkdownBlock]:
        """The block widgets currently shown, in order."""
        return list(self._blocks)

    @property
    def source(self) -> str:
        """Text rendered so far. Chunks still queued for the next frame are not included."""
        return self._stream.text

    def on_mount(self) -> None:
        if self._stream.text:
            self._apply(self._stream.update())

    def append(self, chunk: str) -> None:
        """Queue a chunk; it is rendered on the next frame."""
        if self._stream.finished:
            logger.warning("Chunk received after the stream finished; dropped")
            return
        self._chunks.append(chunk)

    def finish(self) -> None:
        """Render everything still queued and mark every block as final."""
        self._chunks.flush_sync()
        self._stream.finish()
        self._apply(self._stream.update())
        self.post_message(self.Finished(self))

    def clear(self) -> None:
        """Remove all blocks and start a new stream."""
        for block in self._blocks:
            block.remove()
        self._blocks.clear()
        self._chunks.clear()
        self._stream.reset()

    def _drain(self, text: str) -> None:
        try:
            self._stream.append(text)
            update = self._stream.update()
            self._apply(update)
        except Exception:
            logger.exception("Error rendering stream batch")
            return
        if update:
            self.post_message(self.Updated(self, len(update.changed)))

    def _apply(self, update: BlockUpdate) -> None:
        for surplus in self._blocks[update.count :]:
            surplus.remove()
        del self._blocks[update.count :]

        for rendered in update.changed:
            if rendered.index < len(self._blocks):
                block = self._blocks[rendered.index]
                if block.markdown_text != rendered.text:
                    block.markdown_text = rendered.text
                    block.update(rendered.text)
            else:
                block = MarkdownBlock(rendered.text, rendered.index)
                self._blocks.append(block)
                self.mount(block)

        for block in self._blocks:
            block.set_class(
                not self._stream.finished and block.block_index == update.count - 1,
                "-streaming",
            )

    def on_markdown_link_clicked(self, event: Markdown.LinkClicked) -> None:
        event.stop()
        if event.href == INCOMPLETE_LINK_HREF:
            return
        self.app.open_url(event.href)
