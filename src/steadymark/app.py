import argparse
import logging
import sys
import time

from rich.console import Console
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer

from steadymark.config import StreamdownConfig, load_config
from steadymark.ui import LiveMarkdown, StreamdownView
from steadymark.utils.theme import (
    THEME_NAME,
    create_steadymark_theme,
    streaming_variables,
)

logger = logging.getLogger(__name__)


def iter_chunks(text: str, chunk_size: int):
    """Split *text* into chunks of at most *chunk_size* characters."""
    chunk_size = max(1, chunk_size)
    for start in range(0, len(text), chunk_size):
        yield text[start : start + chunk_size]


class StreamdownApp(App):
    """Replays a markdown document as if it were streamed by a model."""

    TITLE = "steadymark"

    CSS = """
    #output {
        padding: 0 1;
    }
    MarkdownBlock.-streaming {
        border-left: outer $streaming-border;
        color: $streaming-foreground;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("r", "replay", "Replay"),
        Binding("f2", "toggle_footer", "Toggle Help"),
    ]

    def __init__(
        self,
        text: str,
        config: StreamdownConfig,
        chunk_size: int = 8,
        delay: float = 0.02,
    ) -> None:
        self.document = text
        self.config = config
        self.chunk_size = chunk_size
        self.delay = delay
        self.footer_visible = False
        self._chunks: list[str] = []
        self._timer = None
        super().__init__()

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="output"):
            yield StreamdownView(config=self.config, id="view")
        footer = Footer()
        footer.display = False
        yield footer

    def get_theme_variable_defaults(self) -> dict[str, str]:
        # The CSS is parsed before on_mount registers the steadymark theme.
        return streaming_variables()

    def on_mount(self) -> None:
        self.register_theme(create_steadymark_theme())
        self.theme = THEME_NAME
        self.action_replay()

    def action_replay(self) -> None:
        """Clear the view and stream the document again from the start."""
        if self._timer is not None:
            self._timer.stop()
        self.query_one(StreamdownView).clear()
        self._chunks = list(iter_chunks(self.document, self.chunk_size))
        self._chunks.reverse()
        self._timer = self.set_interval(self.delay, self._feed_next)

    def _feed_next(self) -> None:
        view = self.query_one(StreamdownView)
        if not self._chunks:
            self._timer.stop()
            view.finish()
            return
        view.append(self._chunks.pop())

    def on_streamdown_view_updated(self, event: StreamdownView.Updated) -> None:
        output = self.query_one("#output", VerticalScroll)
        self.call_after_refresh(lambda: output.scroll_end(animate=False))

    def on_streamdown_view_finished(self, event: StreamdownView.Finished) -> None:
        logger.info("Stream finished (%d chars)", len(self.document))

    def action_toggle_footer(self) -> None:
        """Toggle the visibility of the footer."""
        footer = self.query_one(Footer)
        self.footer_visible = not self.footer_visible
        footer.display = self.footer_visible


def replay_to_console(
    text: str,
    config: StreamdownConfig,
    chunk_size: int = 8,
    delay: float = 0.02,
    console: Console | None = None,
) -> None:
    """Stream *text* into a Rich live display, one chunk every *delay* seconds."""
    with LiveMarkdown(console=console, config=config) as live:
        for chunk in iter_chunks(text, chunk_size):
            live.append(chunk)
            if delay:
                time.sleep(delay)


def main():
    """Main entry point for the steadymark command."""
    parser = argparse.ArgumentParser(
        description="Replay a markdown document as a token stream."
    )
    parser.add_argument(
        "file", nargs="?", default="-", help="Markdown file to replay ('-' for stdin)"
    )
    parser.add_argument(
        "--chunk-size", type=int, default=8, help="Characters per streamed chunk"
    )
    parser.add_argument(
        "--delay", type=float, default=0.02, help="Seconds between chunks"
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        default=None,
        help="Render blocks without completing unterminated markdown",
    )
    parser.add_argument(
        "--links",
        action="store_true",
        default=None,
        help="Complete links whose target hasn't arrived yet",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        default=False,
        help="Render with a Rich live display instead of the Textual app",
    )
    parser.add_argument(
        "--fullscreen", action="store_true", default=None, help="Full screen"
    )
    parser.add_argument(
        "--logging", action="store_true", default=None, help="Enable logging"
    )
    args = parser.parse_args()

    # Load configuration from ~/.config/steadymark/init.py
    config, config_error = load_config()

    # Command-line arguments override config
    if args.raw:
        config.parse_incomplete_markdown = False
    if args.links:
        config.complete_links = True
    if args.logging:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            filename="steadymark.log",
            filemode="a",  # append mode
        )
        logging.getLogger("steadymark").setLevel(logging.DEBUG)

    try:
        if args.file == "-":
            text = sys.stdin.read()
        else:
            with open(args.file, encoding="utf-8") as f:
                text = f.read()
    except OSError as e:
        print(f"steadymark: cannot read {args.file}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.console:
        console = Console()
        if config_error:
            console.print(f"Config error: {config_error}", style="yellow", markup=False)
        replay_to_console(text, config, args.chunk_size, args.delay, console)
        return

    app = StreamdownApp(text, config, chunk_size=args.chunk_size, delay=args.delay)

    # Show config error if any (as a notification once app starts)
    if config_error:
        app.call_later(
            lambda: app.notify(
                f"Config error: {config_error}", severity="warning", timeout=10
            )
        )

    if args.fullscreen:
        app.run()
    else:
        app.run(inline=True, inline_no_clear=True)


if __name__ == "__main__":
    main()
