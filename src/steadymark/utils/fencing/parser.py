"""Pure line-level parsing for markdown code fences (no UI dependencies)."""

from __future__ import annotations

from steadymark.utils.fencing.state import Fence, FenceState

FENCE_MARKERS = ("`", "~")
MIN_FENCE_LENGTH = 3


def _run_length(line: str, start: int, ch: str) -> int:
    end = start
    while end < len(line) and line[end] == ch:
        end += 1
    return end - start


def match_fence_open(line: str) -> Fence | None:
    """Return the fence opened by *line*, or None if it isn't an opening fence.

    Leading whitespace is allowed (fences nested in list items are indented).
    A backtick fence's info string may not contain backticks, otherwise the
    line is an inline code span such as "```x```".
    """
    body = line.rstrip("\r\n")
    stripped = body.lstrip(" \t")
    if not stripped or stripped[0] not in FENCE_MARKERS:
        return None
    marker = stripped[0]
    length = _run_length(stripped, 0, marker)
    if length < MIN_FENCE_LENGTH:
        return None
    info = stripped[length:]
    if marker == "`" and "`" in info:
        return None
    return Fence(marker=marker, length=length, info=info.strip())


def closes_fence(line: str, fence: Fence) -> bool:
    """True if *line* closes *fence*: same marker, at least as long, nothing after."""
    stripped = line.strip()
    if not stripped or stripped[0] != fence.marker:
        return False
    length = _run_length(stripped, 0, fence.marker)
    return length >= fence.length and length == len(stripped)


class FenceTracker:
    """Tracks fence open/close state across lines fed one at a time.

    Usage:
        tracker = FenceTracker()
        for line in lines:
            event = tracker.feed(line)
            if tracker.in_fence:
                ...
    """

    def __init__(self) -> None:
        self._fence: Fence | None = None

    @property
    def in_fence(self) -> bool:
        """True while an opened fence has not been closed."""
        return self._fence is not None

    def feed(self, line: str) -> FenceState | None:
        """Process one line, returning the new state if the line changed it."""
        if self._fence is not None:
            if closes_fence(line, self._fence):
                self._fence = None
                return FenceState.PROSE
            return None
        fence = match_fence_open(line)
        if fence is not None:
            self._fence = fence
            return FenceState.CODE
        return None
