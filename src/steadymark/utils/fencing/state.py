"""State types for code fence detection."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class FenceState(enum.Enum):
    """Whether a line scan is currently in prose or inside a fenced block."""

    PROSE = "prose"
    CODE = "code"


@dataclass(frozen=True)
class Fence:
    """An opening fence line: marker character, run length and info string."""

    marker: str
    length: int
    info: str = ""
