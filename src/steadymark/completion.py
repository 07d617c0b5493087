"""Close markdown delimiters left open by a stream that is still arriving.

The completer never rewrites text: it scans once from the left, tracking
which delimiters are open, and appends the closers a renderer needs to show
the partial text the way the finished text will look. Single ``$`` signs are
always literal (currency); only ``$$`` is a math delimiter. An open code
fence is left open.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from steadymark.utils.fencing import Fence, closes_fence, match_fence_open
from steadymark.utils.text import split_lines

INCOMPLETE_LINK_HREF = "steadymark:incomplete-link"

MARKER_CHARS = frozenset("*~`$")
# Characters that don't count as content after an emphasis opener.
_EMPHASIS_NOISE = MARKER_CHARS | {"_"}
_STAR_BREAK = re.compile(r"^ {0,3}(?:\*[ \t]*){3,}$")


class Delimiter(enum.Enum):
    """Inline delimiter classes the completer can close."""

    BOLD = "**"
    ITALIC = "*"
    STRIKETHROUGH = "~~"
    CODE = "`"
    MATH = "$$"
    LINK = "["


_OPAQUE = frozenset({Delimiter.CODE, Delimiter.MATH})


@dataclass(frozen=True)
class DelimiterRun:
    """A maximal run of one marker character."""

    char: str
    start: int
    length: int
    line_start: bool = False

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(eq=False)
class OpenMarker:
    """An opening delimiter still waiting for its closer.

    ``position`` is the offset just past the opening token; whatever follows
    it is the marker's content.
    """

    delimiter: Delimiter
    position: int
    length: int = 1
    line_start: bool = False
    # Links only: "label" until "](" is seen, then "url".
    stage: str = "label"
    image: bool = False

    @property
    def opaque(self) -> bool:
        if self.delimiter is Delimiter.LINK:
            return self.stage == "url"
        return self.delimiter in _OPAQUE


@dataclass
class OpenMarkerState:
    """Transient scan state: open inline markers (innermost last) and the open fence."""

    stack: list[OpenMarker] = field(default_factory=list)
    fence: Fence | None = None
    dangling_escape: bool = False

    def find(self, delimiter: Delimiter) -> OpenMarker | None:
        for marker in reversed(self.stack):
            if marker.delimiter is delimiter:
                return marker
        return None

    def opaque(self) -> OpenMarker | None:
        """The open span whose content must not be tokenized, if any."""
        if self.stack and self.stack[-1].opaque:
            return self.stack[-1]
        return None

    def toggle(self, delimiter: Delimiter, position: int, line_start: bool = False) -> None:
        marker = self.find(delimiter)
        if marker is not None:
            self.stack.remove(marker)
        else:
            self.stack.append(OpenMarker(delimiter, position, line_start=line_start))

    def drop(self, delimiter: Delimiter) -> None:
        self.stack = [m for m in self.stack if m.delimiter is not delimiter]


class _Scanner:
    """Single left-to-right pass over a block, line by line."""

    def __init__(self, text: str, complete_links: bool = False) -> None:
        self._text = text
        self._complete_links = complete_links
        self.state = OpenMarkerState()

    def scan(self) -> OpenMarkerState:
        offset = 0
        for line in split_lines(self._text):
            body = line.rstrip("\n")
            self._scan_line(body, offset)
            if line.endswith("\n"):
                # Links never span lines, and a backslash before a newline
                # is a hard break rather than an escape.
                self.state.drop(Delimiter.LINK)
                self.state.dangling_escape = False
            offset += len(line)
        return self.state

    def _scan_line(self, line: str, offset: int) -> None:
        state = self.state
        if state.fence is not None:
            if closes_fence(line, state.fence):
                state.fence = None
            return
        fence = match_fence_open(line)
        if fence is not None:
            # Inline spans can't continue across a fenced block.
            state.stack.clear()
            state.fence = fence
            return
        if state.opaque() is None and _STAR_BREAK.match(line):
            return

        at_line_start = True
        j = 0
        while j < len(line):
            ch = line[j]
            opaque = state.opaque()
            if opaque is not None and opaque.delimiter is Delimiter.LINK:
                # Link target: only ")" or whitespace ends it.
                if ch == ")" or ch.isspace():
                    state.drop(Delimiter.LINK)
                j += 1
                continue
            if ch in " \t":
                j += 1
                continue
            line_start, at_line_start = at_line_start, False
            if opaque is None and ch == "\\":
                if j + 1 == len(line):
                    state.dangling_escape = True
                j += 2
                continue
            if ch in MARKER_CHARS:
                length = 1
                while j + length < len(line) and line[j + length] == ch:
                    length += 1
                run = DelimiterRun(
                    char=ch, start=offset + j, length=length, line_start=line_start
                )
                self._consume(run, line[j + length : j + length + 1])
                j += length
                continue
            if opaque is None and self._complete_links:
                j += self._scan_bracket(line, j, offset)
                continue
            j += 1

    def _consume(self, run: DelimiterRun, next_char: str) -> None:
        state = self.state
        opaque = state.opaque()
        if opaque is not None:
            if opaque.delimiter is Delimiter.CODE:
                if run.char == "`" and run.length == opaque.length:
                    state.stack.pop()
            elif run.char == "$":
                self._toggle_pairs(Delimiter.MATH, run)
            return

        if run.char == "*":
            if (
                run.length == 1
                and run.line_start
                and next_char in ("", " ", "\t")
                and state.find(Delimiter.ITALIC) is None
            ):
                # List bullet.
                return
            self._toggle_pairs(Delimiter.BOLD, run)
            if run.length % 2:
                if state.find(Delimiter.ITALIC) is not None:
                    state.toggle(Delimiter.ITALIC, run.end)
                elif next_char and not next_char.isspace():
                    state.toggle(Delimiter.ITALIC, run.end)
        elif run.char == "~":
            self._toggle_pairs(Delimiter.STRIKETHROUGH, run)
        elif run.char == "$":
            self._toggle_pairs(Delimiter.MATH, run)
        elif run.char == "`":
            state.stack.append(
                OpenMarker(Delimiter.CODE, run.end, length=run.length)
            )

    def _toggle_pairs(self, delimiter: Delimiter, run: DelimiterRun) -> None:
        """Split a run into two-character tokens, toggling *delimiter* for each."""
        for k in range(run.length // 2):
            self.state.toggle(
                delimiter,
                run.start + 2 * (k + 1),
                line_start=run.line_start and k == 0,
            )

    def _scan_bracket(self, line: str, j: int, offset: int) -> int:
        state = self.state
        ch = line[j]
        if ch == "[":
            state.drop(Delimiter.LINK)
            image = j > 0 and line[j - 1] == "!"
            state.stack.append(OpenMarker(Delimiter.LINK, offset + j + 1, image=image))
        elif ch == "]":
            link = state.find(Delimiter.LINK)
            if link is not None:
                if line[j + 1 : j + 2] == "(":
                    # Close anything opened inside the label first.
                    state.stack = state.stack[: state.stack.index(link) + 1]
                    link.stage = "url"
                    link.position = offset + j + 2
                    return 2
                state.drop(Delimiter.LINK)
        return 1


def _has_content(text: str, marker: OpenMarker) -> bool:
    after = text[marker.position :]
    if marker.opaque:
        return bool(after.strip())
    return any(not ch.isspace() and ch not in _EMPHASIS_NOISE for ch in after)


def _closer(text: str, marker: OpenMarker) -> str | None:
    delimiter = marker.delimiter
    if delimiter is Delimiter.LINK:
        if marker.image:
            return None
        if marker.stage == "url":
            url = text[marker.position :]
            return ")" if url else INCOMPLETE_LINK_HREF + ")"
        if not _has_content(text, marker):
            return None
        return "](" + INCOMPLETE_LINK_HREF + ")"
    if not _has_content(text, marker):
        return None
    if delimiter is Delimiter.CODE:
        closer = "`" * marker.length
        # A trailing backtick would merge with the closer into a longer run.
        return " " + closer if text.endswith("`") else closer
    if delimiter is Delimiter.MATH:
        span = text[marker.position :]
        if marker.line_start and "\n" in span and not text.endswith("\n"):
            return "\n$$"
        return "$$"
    return delimiter.value


def scan_markers(text: str, complete_links: bool = False) -> OpenMarkerState:
    """Scan *text* and return the delimiters still open at its end."""
    return _Scanner(text, complete_links=complete_links).scan()


def _closers(text: str, complete_links: bool) -> str:
    state = scan_markers(text, complete_links=complete_links)
    if state.fence is not None or state.dangling_escape:
        return ""
    closers = ""
    for marker in reversed(state.stack):
        closer = _closer(text + closers, marker)
        if not closer:
            # The enclosing markers wait until this one has content.
            break
        closers += closer
    return closers


def parse_incomplete_markdown(text: str, *, complete_links: bool = False) -> str:
    """Return *text* with closers appended for delimiters left open.

    Bold, italic, strikethrough, inline code and ``$$`` math are closed,
    innermost first. With ``complete_links`` an unfinished link gets its
    ``)`` (or a placeholder target, ``INCOMPLETE_LINK_HREF``). Nothing is
    appended while a code fence is open, when the text ends in a dangling
    backslash, or while the innermost opener has nothing after it yet.

    Closers go at the very end, after any trailing whitespace, so
    ``"**bold "`` becomes ``"**bold **"``, which markdown renders with
    literal asterisks. Strip the text first when rendering a snapshot
    (``MarkdownStream`` does). Closers that a rescan would not read as
    closers are withheld until more text arrives, so completing twice
    changes nothing. Never raises.
    """
    if not text:
        return text
    closers = _closers(text, complete_links)
    if not closers:
        return text
    completed = text + closers
    if _closers(completed, complete_links):
        return text
    return completed
