"""Code fence parsing utilities."""

from __future__ import annotations

from steadymark.utils.fencing.parser import (
    FenceTracker,
    closes_fence,
    match_fence_open,
)
from steadymark.utils.fencing.state import Fence, FenceState

__all__ = [
    "Fence",
    "FenceState",
    "FenceTracker",
    "closes_fence",
    "match_fence_open",
]
