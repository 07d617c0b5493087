"""Rich console rendering for streamed markdown, outside of a Textual app."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown

from steadymark.config import StreamdownConfig
from steadymark.streaming import MarkdownStream

logger = logging.getLogger(__name__)


def render_markdown(text: str, config: Optional[StreamdownConfig] = None) -> Group:
    """Render a (possibly incomplete) markdown snapshot as a group of blocks."""
    config = config or StreamdownConfig()
    stream = MarkdownStream(config)
    stream.append(text)
    theme = config.theme
    return Group(
        *(Markdown(block.text, **theme.rich_kwargs()) for block in stream.blocks())
    )


def render_to_console(
    console: Console, text: str, config: Optional[StreamdownConfig] = None
) -> None:
    """Print a markdown snapshot to *console*."""
    console.print(render_markdown(text, config))


class LiveMarkdown:
    """Streams markdown into a ``rich.live.Live`` display.

    Keeps one ``Markdown`` renderable per block and rebuilds only the ones
    whose completed text changed. Live refreshes on its own timer, at most
    once per ``config.min_interval``.

    Usage:
        with LiveMarkdown(console) as live:
            for chunk in chunks:
                live.append(chunk)
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        config: Optional[StreamdownConfig] = None,
    ) -> None:
        self._config = config or StreamdownConfig()
        self._stream = MarkdownStream(self._config)
        self._renderables: list[Markdown] = []
        interval = self._config.min_interval
        # An interval of 0 means unthrottled: refresh on every append.
        self._auto_refresh = interval > 0
        self._live = Live(
            Group(),
            console=console,
            auto_refresh=self._auto_refresh,
            refresh_per_second=1.0 / interval if self._auto_refresh else 4,
            vertical_overflow="visible",
        )

    @property
    def stream(self) -> MarkdownStream:
        return self._stream

    @property
    def renderables(self) -> list[Markdown]:
        return list(self._renderables)

    def __enter__(self) -> LiveMarkdown:
        self._live.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.finish()
        self._live.stop()

    def append(self, chunk: str) -> None:
        self._stream.append(chunk)
        self._refresh()

    def finish(self) -> None:
        """Render the final state of the stream."""
        self._stream.finish()
        self._refresh()
        self._live.refresh()

    def _refresh(self) -> None:
        update = self._stream.update()
        del self._renderables[update.count :]
        kwargs = self._config.theme.rich_kwargs()
        for rendered in update.changed:
            markdown = Markdown(rendered.text, **kwargs)
            if rendered.index < len(self._renderables):
                self._renderables[rendered.index] = markdown
            else:
                self._renderables.append(markdown)
        if update:
            logger.debug("Live display: %d blocks rebuilt", len(update.changed))
        self._live.update(Group(*self._renderables), refresh=not self._auto_refresh)
