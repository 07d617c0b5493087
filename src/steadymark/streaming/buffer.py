from __future__ import annotations

import time
from typing import Callable


class ChunkBuffer:
    """Collects stream chunks and hands them to ``drain`` in batches.

    At most one drain runs per ``min_interval`` seconds (30 FPS by default),
    so a fast token stream re-renders once per frame instead of once per
    token. Scheduling is left to the caller's event loop.

    Args:
        schedule: Defers a callback to the next event-loop tick
                  (e.g. ``widget.call_later``).
        drain: Called with all text accumulated since the last drain.
        min_interval: Minimum seconds between drains.
        schedule_delayed: ``(delay, callback)`` timer used when a drain must
                  wait for the frame interval (e.g. ``widget.set_timer``).
                  Without one, throttled drains are deferred like normal ones.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        schedule: Callable[[Callable[[], None]], object],
        drain: Callable[[str], object],
        min_interval: float = 1.0 / 30.0,
        schedule_delayed: Callable[[float, Callable[[], None]], object] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._schedule = schedule
        self._schedule_delayed = schedule_delayed
        self._drain = drain
        self._min_interval = min_interval
        self._clock = clock
        self._buffer: str = ""
        self._scheduled: bool = False
        self._last_drain_time: float | None = None

    def append(self, text: str) -> None:
        """Add *text* to the buffer and schedule a drain if none is pending."""
        if not text:
            return
        self._buffer += text
        if self._scheduled:
            return
        self._scheduled = True
        delay = self._remaining_interval()
        if delay > 0 and self._schedule_delayed is not None:
            self._schedule_delayed(delay, self._flush)
        else:
            self._schedule(self._flush)

    def _remaining_interval(self) -> float:
        if self._last_drain_time is None:
            return 0.0
        elapsed = self._clock() - self._last_drain_time
        return max(0.0, self._min_interval - elapsed)

    def _flush(self) -> None:
        self._scheduled = False
        self.flush_sync()

    def flush_sync(self) -> None:
        """Drain any remaining buffered text immediately."""
        if not self._buffer:
            return
        text = self._buffer
        self._buffer = ""
        self._last_drain_time = self._clock()
        self._drain(text)

    def clear(self) -> None:
        """Discard buffered text without draining it."""
        self._buffer = ""

    @property
    def pending(self) -> bool:
        """True if the buffer has un-drained text."""
        return bool(self._buffer)
